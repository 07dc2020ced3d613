"""Root pytest configuration for all tests."""

import pytest

from src.bitbucket_client.auth import ANONYMOUS_CREDENTIALS
from src.bitbucket_client.request_executor import BitbucketRequestExecutor
from tests.fixtures.bitbucket_responses import BITBUCKET_BASE_URL
from tests.helpers.fake_remote_server import FakeRemoteHttpServer


@pytest.fixture
def fake_server() -> FakeRemoteHttpServer:
    """Fresh fake server with no mapped responses."""
    return FakeRemoteHttpServer()


@pytest.fixture
def bitbucket_executor(fake_server) -> BitbucketRequestExecutor:
    """Anonymous request executor talking to the fake server."""
    return BitbucketRequestExecutor(BITBUCKET_BASE_URL, fake_server, ANONYMOUS_CREDENTIALS)


@pytest.fixture(autouse=True)
def clean_bitbucket_env(monkeypatch):
    """Keep BITBUCKET_* settings from the developer's shell out of tests."""
    for name in ('BITBUCKET_URL', 'BITBUCKET_TOKEN', 'BITBUCKET_USER', 'BITBUCKET_PASSWORD'):
        monkeypatch.delenv(name, raising=False)
