"""Download configuration: the parameters a single run is invoked with."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from .errors import ConfigurationError
from .utils import read_yaml

log = logging.getLogger(__name__)

DEFAULT_CONFIG = "config/config.yaml"


@dataclass(frozen=True)
class DownloadConfig:
    """Immutable parameters of one download run.

    `destination` is a directory if and only if it ends with "/".
    """

    bucket_name: str
    destination: str
    source: str = ""
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    endpoint: Optional[str] = None
    signing_region: Optional[str] = None
    skip_ssl_verification: bool = False
    profile: Optional[str] = None
    progress: bool = False

    def validate(self) -> "DownloadConfig":
        if not self.bucket_name:
            raise ConfigurationError("Missing required parameter: bucket_name")
        if not self.destination:
            raise ConfigurationError("Missing required parameter: destination")
        if bool(self.access_key) != bool(self.secret_key):
            log.warning("Only one of access_key/secret_key given; using the default credential chain")
        if self.signing_region and not self.endpoint:
            log.warning("signing_region is ignored without endpoint")
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DownloadConfig":
        """Build and validate a config; a missing or None `source` becomes ""."""
        known = {k: v for k, v in values.items() if k in cls.__dataclass_fields__}
        cfg = cls(
            bucket_name=known.pop("bucket_name", None) or "",
            destination=known.pop("destination", None) or "",
            **known,
        )
        if cfg.source is None:
            cfg = replace(cfg, source="")
        return cfg.validate()


def load_yaml_config(config_path: Optional[str]) -> dict:
    """
    Load YAML config if present, otherwise return {}.
    Never crash on missing/empty config.
    """
    path = config_path or DEFAULT_CONFIG
    try:
        cfg = read_yaml(path)
    except FileNotFoundError:
        if config_path:
            raise ConfigurationError(f"Config file not found: {config_path}")
        return {}
    if not isinstance(cfg, dict):
        raise ConfigurationError(f"Config file must hold a mapping: {path}")
    return cfg


def values_from_yaml(cfg: Mapping[str, Any]) -> dict:
    """Flatten the `aws:` and `download:` sections into DownloadConfig field names."""
    aws = cfg.get("aws") or {}
    dl = cfg.get("download") or {}
    values = {
        "access_key": aws.get("access_key_id"),
        "secret_key": aws.get("secret_access_key"),
        "profile": aws.get("profile"),
        "endpoint": aws.get("endpoint"),
        "signing_region": aws.get("signing_region"),
        "skip_ssl_verification": aws.get("skip_ssl_verification"),
        "bucket_name": dl.get("bucket"),
        "source": dl.get("source"),
        "destination": dl.get("destination"),
        "progress": dl.get("progress"),
    }
    return {k: v for k, v in values.items() if v is not None}
