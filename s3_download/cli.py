# cli.py
from __future__ import annotations

import logging
from typing import Optional

import typer
from botocore.exceptions import BotoCoreError, ClientError

from .config import DownloadConfig, load_yaml_config, values_from_yaml
from .download import download
from .errors import S3DownloadToolError, setup_logging
from .utils import parse_s3_uri

app = typer.Typer(add_completion=False, help="Download objects from an S3 bucket")

ENV_PREFIX = "S3_DOWNLOAD_"


def _env(name: str) -> str:
    return f"{ENV_PREFIX}{name}"


# ---------------- Root options (global) ----------------
@app.callback()
def _root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
    logfile: Optional[str] = typer.Option(None, "--logfile", help="Also write the log to this file"),
):
    """
    Set up logging once.
    """
    level = logging.DEBUG if verbose else logging.INFO
    setup_logging(level=level, logfile=logfile)


# ---------------- DOWNLOAD ----------------
@app.command("download")
def cmd_download(
    from_uri: Optional[str] = typer.Option(None, "--from", help="Bucket and source as one URI (e.g. s3://bucket/prefix/)"),
    bucket: Optional[str] = typer.Option(None, "--bucket", envvar=_env("BUCKET_NAME"), help="Bucket to download from"),
    source: Optional[str] = typer.Option(None, "--source", envvar=_env("SOURCE"), help="Key or prefix to download (default: whole bucket)"),
    destination: Optional[str] = typer.Option(
        None, "--destination", "--to", envvar=_env("DESTINATION"),
        help="Local path; treated as a directory only if it ends with /",
    ),
    access_key: Optional[str] = typer.Option(None, "--access-key", envvar=_env("ACCESS_KEY"), help="Access key"),
    secret_key: Optional[str] = typer.Option(None, "--secret-key", envvar=_env("SECRET_KEY"), help="Secret key"),
    profile: Optional[str] = typer.Option(None, "--profile", envvar=_env("PROFILE"), help="AWS profile name"),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", envvar=_env("ENDPOINT"), help="Alternate S3 endpoint URL"),
    signing_region: Optional[str] = typer.Option(
        None, "--signing-region", envvar=_env("SIGNING_REGION"),
        help="Region used for SigV4 signing; only used with --endpoint",
    ),
    skip_ssl_verification: Optional[bool] = typer.Option(
        None, "--skip-ssl-verification/--verify-ssl", envvar=_env("SKIP_SSL_VERIFICATION"),
        help="Skip endpoint SSL verification",
    ),
    progress: Optional[bool] = typer.Option(None, "--progress/--no-progress", help="Count downloaded objects"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to YAML config"),
):
    log = logging.getLogger("s3_download.cli.download")

    if from_uri:
        try:
            bucket, source = parse_s3_uri(from_uri)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--from")

    try:
        values = values_from_yaml(load_yaml_config(config))
    except S3DownloadToolError as e:
        raise typer.BadParameter(str(e), param_hint="--config")

    # resolve values: CLI flag / env -> YAML
    flags = {
        "bucket_name": bucket,
        "source": source,
        "destination": destination,
        "access_key": access_key,
        "secret_key": secret_key,
        "profile": profile,
        "endpoint": endpoint,
        "signing_region": signing_region,
        "skip_ssl_verification": skip_ssl_verification,
        "progress": progress,
    }
    values.update({k: v for k, v in flags.items() if v is not None})

    if not values.get("bucket_name"):
        raise typer.BadParameter("Provide --bucket (or --from) or set download.bucket in config.yaml")
    if not values.get("destination"):
        raise typer.BadParameter("Provide --destination or set download.destination in config.yaml")

    log.info("--- s3-download")
    try:
        res = download(DownloadConfig.from_mapping(values))
    except (S3DownloadToolError, BotoCoreError, ClientError, OSError) as e:
        log.error("Unable to download from S3: %s", e)
        raise typer.Exit(code=1)

    log.info("Files=%d Directories=%d Dest=%s", len(res.files), len(res.directories), res.destination)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
