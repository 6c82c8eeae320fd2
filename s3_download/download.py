from __future__ import annotations
from dataclasses import dataclass, field
from typing import List
from pathlib import Path
import logging

from boto3.s3.transfer import TransferConfig
from tqdm import tqdm

from .config import DownloadConfig
from .core import bucket_exists, get_s3_client, list_keys
from .errors import BucketNotFoundError, ConfigurationError, S3DownloadError, log_and_reraise
from .utils import ensure_dir, is_directory

log = logging.getLogger(__name__)

# one request at a time, no worker threads
_TRANSFER_CONFIG = TransferConfig(use_threads=False)


@dataclass
class DownloadResult:
    """What a run wrote to disk, in listing order."""

    bucket: str
    source: str
    destination: str
    files: List[Path] = field(default_factory=list)
    directories: List[Path] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.files) + len(self.directories)


@log_and_reraise()
def fetch_object(s3_client, bucket: str, key: str, target: Path | str) -> Path:
    """
    Download one object into `target`, creating missing parent directories.

    The managed transfer writes to a temporary file and renames it over
    `target`, so a failed transfer never leaves a partial file behind.
    """
    dst = Path(target)
    ensure_dir(dst.parent)
    s3_client.download_file(bucket, key, str(dst), Config=_TRANSFER_CONFIG)
    return dst


def _target_for(dst_root: Path | str, key: str) -> Path:
    rel = key.lstrip("/")
    target = Path(dst_root) / rel
    root = Path(dst_root).resolve()
    resolved = (root / rel).resolve()
    if resolved != root and root not in resolved.parents:
        raise S3DownloadError(f"Key {key!r} resolves outside of {root}")
    return target


@log_and_reraise()
def download_key(s3_client, bucket: str, dst_root: Path | str, key: str) -> Path:
    """
    Download `key` below `dst_root`, keeping its "/"-separated structure.
    A directory-shaped key only creates the local directory.
    """
    target = _target_for(dst_root, key)
    if is_directory(key):
        ensure_dir(target)
        return target
    return fetch_object(s3_client, bucket, key, target)


@log_and_reraise()
def _create_destination(path: Path) -> None:
    ensure_dir(path)


def run_download(s3_client, config: DownloadConfig) -> DownloadResult:
    """
    Check the bucket, then download either the whole `source` prefix (directory
    destination) or the single `source` object (file destination).
    """
    config.validate()
    bucket, source, destination = config.bucket_name, config.source or "", config.destination
    to_directory = is_directory(destination)
    if not to_directory and (not source or is_directory(source)):
        raise ConfigurationError(
            f"Destination {destination!r} is a file, so source must name a single object (got {source!r})"
        )

    log.info("Bucket: %s, source: %s, destination: %s", bucket, source, destination)

    if not bucket_exists(s3_client, bucket):
        raise BucketNotFoundError(f"Bucket doesn't exist: {bucket}")

    result = DownloadResult(bucket=bucket, source=source, destination=destination)

    if not to_directory:
        log.debug("Downloading s3://%s/%s -> %s", bucket, source, destination)
        result.files.append(fetch_object(s3_client, bucket, source, destination))
        log.info("Successfully downloaded all files")
        return result

    dst_root = Path(destination)
    _create_destination(dst_root)

    bar = tqdm(desc="Download", unit="obj") if config.progress else None
    try:
        for key in list_keys(s3_client, bucket, prefix=source):
            log.debug("Downloading s3://%s/%s", bucket, key)
            path = download_key(s3_client, bucket, dst_root, key)
            if is_directory(key):
                result.directories.append(path)
            else:
                result.files.append(path)
            if bar:
                bar.update(1)
    finally:
        if bar:
            bar.close()

    log.info("Successfully downloaded all files")
    return result


def download(config: DownloadConfig) -> DownloadResult:
    """Build a client from `config` and run the download with it."""
    config.validate()
    s3 = get_s3_client(
        access_key=config.access_key,
        secret_key=config.secret_key,
        endpoint=config.endpoint,
        signing_region=config.signing_region,
        skip_ssl_verification=config.skip_ssl_verification,
        profile=config.profile,
    )
    return run_download(s3, config)
