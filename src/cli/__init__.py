"""Command-line interface for the Bitbucket client.

This package provides the `bitbucket-client` CLI tool for listing, registering
and deleting repository webhooks and for browsing projects and repositories.
"""

from .models import ExitCode, ClientConfig
from .errors import (
    CLIError,
    ConfigNotFoundError,
    ConfigError,
    ConfigFilesystemError,
)

__all__ = [
    'ExitCode',
    'ClientConfig',
    'CLIError',
    'ConfigNotFoundError',
    'ConfigError',
    'ConfigFilesystemError',
]
