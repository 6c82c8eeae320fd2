from __future__ import annotations
from s3_download.config import DownloadConfig
from s3_download.download import download

if __name__ == "__main__":
    cfg = DownloadConfig(
        bucket_name="my-bucket",
        source="images/",
        destination="downloads/",
        progress=True,
    ).validate()
    res = download(cfg)
    print("Files:", len(res.files), "Directories:", len(res.directories))
