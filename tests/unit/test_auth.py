"""Unit tests for bitbucket_client.auth module."""

import base64

import pytest
from unittest.mock import patch
from src.bitbucket_client.auth import (
    ANONYMOUS_CREDENTIALS,
    AnonymousCredentials,
    Authenticator,
    BasicCredentials,
    TokenCredentials,
)
from src.bitbucket_client.errors import InvalidCredentialsError


def _env(values):
    """Build an os.getenv side effect from a dict."""
    def getenv_side_effect(key, default=None):
        return values.get(key, default)
    return getenv_side_effect


class TestCredentials:
    """Test cases for the credential variants."""

    def test_anonymous_adds_no_header(self):
        """Anonymous credentials leave headers untouched."""
        headers = ANONYMOUS_CREDENTIALS.apply_to({'Accept': 'application/json'})
        assert headers == {'Accept': 'application/json'}

    def test_token_adds_bearer_header(self):
        """Token credentials send a Bearer Authorization header."""
        headers = TokenCredentials('abc123').apply_to({})
        assert headers == {'Authorization': 'Bearer abc123'}

    def test_basic_adds_basic_header(self):
        """Basic credentials send base64 user:password."""
        headers = BasicCredentials('admin', 's3cret').apply_to({})
        expected = base64.b64encode(b'admin:s3cret').decode('ascii')
        assert headers == {'Authorization': f'Basic {expected}'}

    def test_apply_to_does_not_mutate_input(self):
        """apply_to returns a new dict and leaves the caller's headers alone."""
        original = {'Accept': 'application/json'}
        TokenCredentials('abc').apply_to(original)
        assert original == {'Accept': 'application/json'}

    def test_credentials_are_immutable(self):
        """Credential fields cannot be modified after creation."""
        creds = TokenCredentials('abc')
        with pytest.raises(AttributeError):
            creds.token = 'other'

    def test_basic_repr_hides_password(self):
        """The password never appears in repr output."""
        assert 's3cret' not in repr(BasicCredentials('admin', 's3cret'))

    def test_anonymous_constant_type(self):
        assert isinstance(ANONYMOUS_CREDENTIALS, AnonymousCredentials)


class TestAuthenticator:
    """Test cases for Authenticator class."""

    @patch('src.bitbucket_client.auth.load_dotenv')
    def test_init_loads_dotenv(self, mock_load_dotenv):
        """Authenticator __init__ should call load_dotenv()."""
        Authenticator()
        mock_load_dotenv.assert_called_once()

    @patch('src.bitbucket_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_get_base_url(self, mock_getenv, mock_load_dotenv):
        """get_base_url returns BITBUCKET_URL."""
        mock_getenv.side_effect = _env({'BITBUCKET_URL': 'https://bitbucket.example.com'})
        assert Authenticator().get_base_url() == 'https://bitbucket.example.com'

    @patch('src.bitbucket_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_get_base_url_missing(self, mock_getenv, mock_load_dotenv):
        """get_base_url raises InvalidCredentialsError without BITBUCKET_URL."""
        mock_getenv.side_effect = _env({})
        with pytest.raises(InvalidCredentialsError) as exc_info:
            Authenticator().get_base_url()
        assert exc_info.value.missing == ['BITBUCKET_URL']

    @patch('src.bitbucket_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_token_takes_precedence(self, mock_getenv, mock_load_dotenv):
        """A token wins over username and password."""
        mock_getenv.side_effect = _env({
            'BITBUCKET_TOKEN': 'tok',
            'BITBUCKET_USER': 'admin',
            'BITBUCKET_PASSWORD': 'pw',
        })
        assert Authenticator().get_credentials() == TokenCredentials('tok')

    @patch('src.bitbucket_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_basic_credentials(self, mock_getenv, mock_load_dotenv):
        """Username and password give basic credentials."""
        mock_getenv.side_effect = _env({'BITBUCKET_USER': 'admin', 'BITBUCKET_PASSWORD': 'pw'})
        creds = Authenticator().get_credentials()
        assert isinstance(creds, BasicCredentials)
        assert creds.username == 'admin'
        assert creds.password == 'pw'

    @patch('src.bitbucket_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_user_without_password(self, mock_getenv, mock_load_dotenv):
        """A username without password is rejected."""
        mock_getenv.side_effect = _env({'BITBUCKET_USER': 'admin'})
        with pytest.raises(InvalidCredentialsError) as exc_info:
            Authenticator().get_credentials()
        assert exc_info.value.missing == ['BITBUCKET_PASSWORD']

    @patch('src.bitbucket_client.auth.load_dotenv')
    @patch('os.getenv')
    def test_anonymous_when_nothing_set(self, mock_getenv, mock_load_dotenv):
        """No credential settings give anonymous access."""
        mock_getenv.side_effect = _env({})
        assert Authenticator().get_credentials() is ANONYMOUS_CREDENTIALS
