"""Test helper modules for Bitbucket client testing.

This package provides:
- fake_remote_server: in-memory RequestExecutor with canned responses
"""

from .fake_remote_server import FakeRemoteHttpServer, RecordedRequest

__all__ = [
    'FakeRemoteHttpServer',
    'RecordedRequest',
]
