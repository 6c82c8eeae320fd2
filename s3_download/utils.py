from __future__ import annotations
from typing import Any, Dict, Tuple
from pathlib import Path
import re
import yaml


def is_directory(path: str) -> bool:
    """
    True if `path` ends with "/". Purely lexical, the filesystem is never consulted.
    """
    if not path:
        raise ValueError("path must not be empty")
    return path[-1] == "/"


def ensure_dir(path: Path | str) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


_S3_URI_RE = re.compile(r"^s3://[a-zA-Z0-9.\-_]+(/.*)?$")

def is_s3_uri(uri: str) -> bool:
    return bool(_S3_URI_RE.match(uri))


def parse_s3_uri(uri: str) -> Tuple[str, str]:
    """s3://bucket/some/key -> ("bucket", "some/key"); the key part may be empty."""
    if not is_s3_uri(uri):
        raise ValueError(f"Invalid S3 URI: {uri}")
    rest = uri.replace("s3://", "", 1)
    if "/" not in rest:
        return rest, ""
    bucket, key = rest.split("/", 1)
    return bucket, key
