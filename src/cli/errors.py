"""Errors raised by the bitbucket-client command line.

They share the BitbucketError root with the client library so the CLI can
map every failure to an exit code in one place.
"""

from typing import Optional

from src.bitbucket_client.errors import BitbucketError


class CLIError(BitbucketError):
    """Root of the CLI-only errors."""
    pass


class ConfigNotFoundError(CLIError):
    """No config file exists at the given path."""

    def __init__(self, config_path: str):
        super().__init__(f"No bitbucket-client config at {config_path}")
        self.config_path = config_path


class ConfigError(CLIError):
    """Raised when the config file cannot be parsed or a field is invalid.

    Also raised when a command needs a project key or repository slug that
    neither its options nor the config file provide.
    """

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            text = f"Config error in field '{config_field}': {message}"
        else:
            text = f"Config error: {message}"
        super().__init__(text)
        self.config_field = config_field
        self.detail = message


class ConfigFilesystemError(CLIError):
    """Reading or writing the config file failed at the OS level."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        text = f"Could not {operation} config file {file_path}"
        if reason:
            text += f": {reason}"
        super().__init__(text)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
