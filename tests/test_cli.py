from __future__ import annotations

import pytest
from typer.testing import CliRunner

from s3_download import cli
from s3_download.download import DownloadResult
from s3_download.errors import BucketNotFoundError

runner = CliRunner()


@pytest.fixture
def calls(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    seen = []

    def fake_download(config):
        seen.append(config)
        return DownloadResult(bucket=config.bucket_name, source=config.source, destination=config.destination)

    monkeypatch.setattr(cli, "download", fake_download)
    return seen


def test_download_command(calls, tmp_path):
    result = runner.invoke(
        cli.app,
        ["download", "--bucket", "b", "--source", "a/", "--destination", "out/", "--access-key", "AKIA", "--secret-key", "s"],
    )
    assert result.exit_code == 0, result.output
    cfg = calls[0]
    assert (cfg.bucket_name, cfg.source, cfg.destination) == ("b", "a/", "out/")
    assert (cfg.access_key, cfg.secret_key) == ("AKIA", "s")


def test_source_defaults_to_whole_bucket(calls):
    result = runner.invoke(cli.app, ["download", "--bucket", "b", "--destination", "out/"])
    assert result.exit_code == 0, result.output
    assert calls[0].source == ""


def test_from_uri_sets_bucket_and_source(calls):
    result = runner.invoke(cli.app, ["download", "--from", "s3://b/a/x.txt", "--to", "x.txt"])
    assert result.exit_code == 0, result.output
    assert (calls[0].bucket_name, calls[0].source) == ("b", "a/x.txt")


def test_environment_variables(calls, monkeypatch):
    monkeypatch.setenv("S3_DOWNLOAD_BUCKET_NAME", "env-bucket")
    monkeypatch.setenv("S3_DOWNLOAD_ENDPOINT", "https://minio.local")
    monkeypatch.setenv("S3_DOWNLOAD_SIGNING_REGION", "eu-west-1")
    result = runner.invoke(cli.app, ["download", "--destination", "out/", "--skip-ssl-verification"])
    assert result.exit_code == 0, result.output
    cfg = calls[0]
    assert cfg.bucket_name == "env-bucket"
    assert cfg.endpoint == "https://minio.local"
    assert cfg.signing_region == "eu-west-1"
    assert cfg.skip_ssl_verification is True


def test_flags_override_yaml(calls, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("download:\n  bucket: yaml-bucket\n  source: yaml/\n  destination: yaml-out/\n")
    result = runner.invoke(cli.app, ["download", "-c", str(path), "--bucket", "flag-bucket"])
    assert result.exit_code == 0, result.output
    cfg = calls[0]
    assert cfg.bucket_name == "flag-bucket"
    assert cfg.source == "yaml/"
    assert cfg.destination == "yaml-out/"


def test_missing_bucket_is_usage_error(calls):
    result = runner.invoke(cli.app, ["download", "--destination", "out/"])
    assert result.exit_code == 2
    assert calls == []


def test_missing_destination_is_usage_error(calls):
    result = runner.invoke(cli.app, ["download", "--bucket", "b"])
    assert result.exit_code == 2
    assert calls == []


def test_failure_exits_with_one(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)

    def failing(config):
        raise BucketNotFoundError("Bucket doesn't exist: b")

    monkeypatch.setattr(cli, "download", failing)
    result = runner.invoke(cli.app, ["download", "--bucket", "b", "--destination", "out/"])
    assert result.exit_code == 1


def test_uncreatable_destination_reports_failure(s3, stubber, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "blocker").write_text("a file, not a directory")
    stubber.add_response("head_bucket", {}, {"Bucket": "b"})
    monkeypatch.setattr("s3_download.download.get_s3_client", lambda **kw: s3)

    result = runner.invoke(cli.app, ["download", "--bucket", "b", "--destination", "blocker/sub/"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, OSError)
    assert "Unable to download from S3" in result.output
