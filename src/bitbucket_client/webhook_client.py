"""Webhook operations for one Bitbucket repository."""

import logging
from typing import Iterator, Optional

from src.models.webhook import Webhook, WebhookRequest

from .pagination import RetryPolicy, fetch_all
from .request_executor import BitbucketRequestExecutor

logger = logging.getLogger(__name__)


class WebhookClient:
    """Lists, registers and maintains the webhooks of a repository.

    The client is bound to one (project key, repository slug) pair and holds
    no per-call state; any number of webhook streams may be open at once.
    An optional retry policy wraps every page request of a webhook stream.

    Example:
        >>> client = WebhookClient('PROJ', 'repo', executor)
        >>> names = [hook.name for hook in client.get_webhooks('repo:refs_changed')]
    """

    def __init__(
        self,
        project_key: str,
        repo_slug: str,
        request_executor: BitbucketRequestExecutor,
        retry: Optional[RetryPolicy] = None,
    ):
        self.project_key = project_key
        self.repo_slug = repo_slug
        self._request_executor = request_executor
        self._retry = retry

    def _webhooks_url(self, *extra, params=None) -> str:
        return self._request_executor.build_url(
            'projects', self.project_key, 'repos', self.repo_slug, 'webhooks', *extra,
            params=params,
        )

    def get_webhooks(self, *event_filters: str) -> Iterator[Webhook]:
        """Stream the webhooks of the repository.

        Args:
            *event_filters: Event names; only webhooks subscribed to one of them
                are returned. With no filters all webhooks are returned.

        Returns:
            Lazy iterator over all webhooks; later pages are fetched on demand

        Raises:
            NotFoundError: If the project or repository does not exist
            UnauthorizedError: If the credentials were rejected
            ForbiddenError: If the user cannot administer the repository
        """
        url = self._webhooks_url(params=[('event', event) for event in event_filters])
        return fetch_all(self._request_executor, url, Webhook.from_json, self._retry)

    def register_webhook(self, request: WebhookRequest) -> Webhook:
        """Create a webhook and return it as stored by the server.

        Raises:
            ValidationError: If the server rejects the URL or events
        """
        webhook = self._request_executor.post(
            self._webhooks_url(), request.to_json(), Webhook.from_json
        )
        logger.info(
            f"Registered webhook {webhook.id} on {self.project_key}/{self.repo_slug}"
        )
        return webhook

    def get_webhook(self, webhook_id: int) -> Webhook:
        """Fetch a single webhook by id.

        Raises:
            NotFoundError: If no webhook has this id
        """
        return self._request_executor.get(self._webhooks_url(webhook_id), Webhook.from_json)

    def update_webhook(self, webhook_id: int, request: WebhookRequest) -> Webhook:
        """Replace the configuration of an existing webhook."""
        return self._request_executor.put(
            self._webhooks_url(webhook_id), request.to_json(), Webhook.from_json
        )

    def delete_webhook(self, webhook_id: int) -> None:
        """Delete a webhook.

        Raises:
            NotFoundError: If no webhook has this id
        """
        self._request_executor.delete(self._webhooks_url(webhook_id))
        logger.info(
            f"Deleted webhook {webhook_id} on {self.project_key}/{self.repo_slug}"
        )

    def find_webhook(self, callback_url: str, *event_filters: str) -> Optional[Webhook]:
        """Return the first webhook posting to callback_url, or None.

        Pages are only fetched until a match is found.
        """
        for webhook in self.get_webhooks(*event_filters):
            if webhook.url == callback_url:
                return webhook
        return None
