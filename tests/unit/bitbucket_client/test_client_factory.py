"""Unit tests for BitbucketClientFactory."""

from unittest.mock import Mock, patch
from src.bitbucket_client.auth import Authenticator, TokenCredentials
from src.bitbucket_client.client_factory import BitbucketClientFactory
from src.bitbucket_client.project_client import ProjectClient
from src.bitbucket_client.repository_client import RepositoryClient
from src.bitbucket_client.webhook_client import WebhookClient
from tests.fixtures.bitbucket_responses import BITBUCKET_BASE_URL, WEB_HOOKS_IN_SYSTEM, webhooks_url


class TestBitbucketClientFactory:
    """Test cases for BitbucketClientFactory."""

    @patch('src.bitbucket_client.client_factory.RequestsExecutor')
    def test_transport_created_lazily(self, mock_requests_executor):
        """No transport is created until a client is requested."""
        factory = BitbucketClientFactory(BITBUCKET_BASE_URL, timeout=5)
        mock_requests_executor.assert_not_called()

        factory.project_client()
        factory.webhook_client('proj', 'repo')

        mock_requests_executor.assert_called_once_with(timeout=5)

    def test_clients_share_one_executor(self, fake_server):
        factory = BitbucketClientFactory(BITBUCKET_BASE_URL, request_executor=fake_server)

        projects = factory.project_client()
        repositories = factory.repository_client('proj')
        webhooks = factory.webhook_client('proj', 'repo')

        assert isinstance(projects, ProjectClient)
        assert isinstance(repositories, RepositoryClient)
        assert isinstance(webhooks, WebhookClient)
        assert projects._request_executor is repositories._request_executor
        assert webhooks._request_executor is projects._request_executor

    def test_webhook_client_scope(self, fake_server):
        factory = BitbucketClientFactory(BITBUCKET_BASE_URL, request_executor=fake_server)
        client = factory.webhook_client('proj', 'repo')
        assert (client.project_key, client.repo_slug) == ('proj', 'repo')

    def test_credentials_reach_the_transport(self, fake_server):
        fake_server.map_url_to_result(webhooks_url(), WEB_HOOKS_IN_SYSTEM)
        factory = BitbucketClientFactory(
            BITBUCKET_BASE_URL, TokenCredentials('tok'), request_executor=fake_server
        )

        list(factory.webhook_client('proj', 'repo').get_webhooks())

        assert fake_server.requests[0].headers['Authorization'] == 'Bearer tok'

    def test_from_environment(self):
        authenticator = Mock(spec=Authenticator)
        authenticator.get_base_url.return_value = BITBUCKET_BASE_URL
        authenticator.get_credentials.return_value = TokenCredentials('tok')

        factory = BitbucketClientFactory.from_environment(authenticator, timeout=12)

        assert factory.base_url == BITBUCKET_BASE_URL
        assert factory._credentials == TokenCredentials('tok')
        assert factory._timeout == 12

    def test_retry_policy_reaches_client_streams(self, fake_server):
        calls = []

        def retry(func, *args):
            calls.append(args[0])
            return func(*args)

        fake_server.map_url_to_result(webhooks_url(), WEB_HOOKS_IN_SYSTEM)
        factory = BitbucketClientFactory(BITBUCKET_BASE_URL, request_executor=fake_server, retry=retry)

        list(factory.webhook_client('proj', 'repo').get_webhooks())

        assert calls == [webhooks_url()]
