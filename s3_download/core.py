from __future__ import annotations
from typing import Optional, Iterator
import logging
import boto3
import urllib3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from urllib3.exceptions import InsecureRequestWarning

from .errors import ConfigurationError

log = logging.getLogger(__name__)

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


def get_s3_client(
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    endpoint: Optional[str] = None,
    signing_region: Optional[str] = None,
    skip_ssl_verification: bool = False,
    profile: Optional[str] = None,
):
    """
    Create a boto3 S3 client with path-style addressing and no retries.

    An explicit key pair wins; otherwise credentials come from botocore's
    default chain (env vars, shared credentials/config files for `profile`,
    container and instance metadata). `signing_region` only applies together
    with `endpoint`.
    """
    if access_key and secret_key:
        session = boto3.Session(aws_access_key_id=access_key, aws_secret_access_key=secret_key)
    else:
        session = boto3.Session(profile_name=profile) if profile else boto3.Session()

    cfg = Config(
        retries={"max_attempts": 1, "mode": "standard"},
        s3={"addressing_style": "path"},
    )
    client_kwargs = {"config": cfg}
    if endpoint:
        client_kwargs["endpoint_url"] = endpoint
        client_kwargs["region_name"] = signing_region or None

    if not skip_ssl_verification:
        return session.client("s3", **client_kwargs)

    client_kwargs["verify"] = False
    try:
        urllib3.disable_warnings(InsecureRequestWarning)
        return session.client("s3", **client_kwargs)
    except (BotoCoreError, ValueError) as e:
        raise ConfigurationError("Unable to skip ssl verification") from e


def bucket_exists(s3_client, bucket: str) -> bool:
    """HEAD the bucket; False on 404/NoSuchBucket/NotFound. 403 still means it exists."""
    try:
        s3_client.head_bucket(Bucket=bucket)
        return True
    except ClientError as e:
        code = str(e.response.get("Error", {}).get("Code", ""))
        if code in _MISSING_BUCKET_CODES:
            return False
        if code in {"403", "AccessDenied", "Forbidden"}:
            return True
        raise


def list_keys(s3_client, bucket: str, prefix: str = "") -> Iterator[str]:
    """
    Yield every key under `prefix`, page by page, in the order S3 returns them.

    Pages are chained through the continuation marker until a page is no
    longer truncated. Without a delimiter S3 omits NextMarker, in which case
    the last key of the page is the marker.
    """
    params = {"Bucket": bucket, "Prefix": prefix}
    while True:
        page = s3_client.list_objects(**params)
        last_key = None
        for obj in page.get("Contents", []) or []:
            last_key = obj["Key"]
            yield last_key
        if not page.get("IsTruncated"):
            return
        marker = page.get("NextMarker") or last_key
        log.debug("Listing s3://%s/%s continues after %s", bucket, prefix, marker)
        params["Marker"] = marker
