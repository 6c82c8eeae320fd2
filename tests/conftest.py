from __future__ import annotations

import io

import pytest
from botocore.response import StreamingBody
from botocore.stub import Stubber

from s3_download.core import get_s3_client


@pytest.fixture(autouse=True)
def aws_env(monkeypatch):
    """Keep tests away from real credentials and regions."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def s3():
    return get_s3_client(access_key="testing", secret_key="testing")


@pytest.fixture
def stubber(s3):
    with Stubber(s3) as st:
        yield st
        st.assert_no_pending_responses()


def body(data: bytes) -> StreamingBody:
    return StreamingBody(io.BytesIO(data), len(data))


def listing_page(keys, truncated=False, next_marker=None) -> dict:
    page = {
        "Contents": [{"Key": k, "Size": 1} for k in keys],
        "IsTruncated": truncated,
    }
    if next_marker is not None:
        page["NextMarker"] = next_marker
    return page
