"""Credential variants and environment-based credential loading.

Every outgoing request is authenticated by one of three immutable credential
policies (anonymous, access token, or username/password). The Authenticator
loads the server URL and credential material from environment variables using
python-dotenv and picks the matching variant.
"""

import base64
import os
from typing import Dict, NamedTuple, Optional, Union

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class AnonymousCredentials(NamedTuple):
    """No credentials; requests are sent without an Authorization header."""

    def apply_to(self, headers: Dict[str, str]) -> Dict[str, str]:
        return dict(headers)


class TokenCredentials(NamedTuple):
    """Personal access token sent as a Bearer token."""
    token: str

    def apply_to(self, headers: Dict[str, str]) -> Dict[str, str]:
        result = dict(headers)
        result['Authorization'] = f"Bearer {self.token}"
        return result


class BasicCredentials(NamedTuple):
    """Username and password sent with HTTP Basic authentication."""
    username: str
    password: str

    def apply_to(self, headers: Dict[str, str]) -> Dict[str, str]:
        pair = f"{self.username}:{self.password}".encode('utf-8')
        result = dict(headers)
        result['Authorization'] = f"Basic {base64.b64encode(pair).decode('ascii')}"
        return result

    def __repr__(self) -> str:
        return f"BasicCredentials(username={self.username!r}, password='***')"


Credentials = Union[AnonymousCredentials, TokenCredentials, BasicCredentials]

ANONYMOUS_CREDENTIALS = AnonymousCredentials()


class Authenticator:
    """Loads Bitbucket connection settings from environment variables.

    Settings are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Environment variables:
        BITBUCKET_URL: Bitbucket Server base URL (required)
        BITBUCKET_TOKEN: Personal access token (takes precedence)
        BITBUCKET_USER: Username for basic authentication
        BITBUCKET_PASSWORD: Password for basic authentication

    When neither a token nor a username is set the client is anonymous.

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> headers = creds.apply_to({'Accept': 'application/json'})
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_base_url(self) -> str:
        """Get the Bitbucket base URL.

        Raises:
            InvalidCredentialsError: If BITBUCKET_URL is not set
        """
        url = os.getenv('BITBUCKET_URL')
        if not url:
            raise InvalidCredentialsError(['BITBUCKET_URL'])
        return url

    def get_credentials(self) -> Credentials:
        """Get the credential variant described by the environment.

        Returns:
            TokenCredentials, BasicCredentials or ANONYMOUS_CREDENTIALS

        Raises:
            InvalidCredentialsError: If a username is set without a password
        """
        token: Optional[str] = os.getenv('BITBUCKET_TOKEN')
        user = os.getenv('BITBUCKET_USER')
        password = os.getenv('BITBUCKET_PASSWORD')

        if token:
            return TokenCredentials(token=token)

        if user:
            if not password:
                raise InvalidCredentialsError(['BITBUCKET_PASSWORD'])
            return BasicCredentials(username=user, password=password)

        return ANONYMOUS_CREDENTIALS
