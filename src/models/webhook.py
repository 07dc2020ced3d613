"""Webhook data models.

Webhook is the read side returned by the server. WebhookRequest is the write
side sent when registering or updating a webhook; it is created through the
immutable WebhookRequestBuilder and can never hold an empty event set.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple

from src.bitbucket_client.errors import IllegalStateError


def _ordered_events(events: Iterable[str]) -> Tuple[str, ...]:
    """De-duplicate event names, keeping first-seen order."""
    return tuple(dict.fromkeys(events))


@dataclass(frozen=True)
class Webhook:
    """Webhook registered on a repository.

    Attributes:
        id: Server-assigned identifier
        name: Display name
        url: Callback URL the server posts events to
        events: Event names the webhook subscribes to
        active: Whether the server delivers events to the webhook
    """
    id: Optional[int]
    name: Optional[str]
    url: Optional[str]
    events: FrozenSet[str]
    active: bool = True

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Webhook':
        """Build a Webhook from its JSON representation.

        Fields other than id, name, url, events and active are ignored.

        Raises:
            KeyError: If 'events' is missing
            TypeError: If data is not an object or 'events' is not a list
            ValueError: If 'events' is empty
        """
        if not isinstance(data, dict):
            raise TypeError(f"webhook must be a JSON object, got {type(data).__name__}")
        events = data['events']
        if not isinstance(events, list):
            raise TypeError("webhook 'events' must be a list")
        if not events:
            raise ValueError("webhook 'events' must not be empty")
        webhook_id = data.get('id')
        return cls(
            id=int(webhook_id) if webhook_id is not None else None,
            name=data.get('name'),
            url=data.get('url'),
            events=frozenset(events),
            active=bool(data.get('active', True)),
        )


@dataclass(frozen=True)
class WebhookRequest:
    """Body of a webhook create or update request.

    Attributes:
        events: Event names to subscribe to (never empty)
        url: Callback URL
        name: Display name
        active: Whether the webhook should be active (default True)
    """
    events: Tuple[str, ...]
    url: Optional[str] = None
    name: Optional[str] = None
    active: bool = True

    def __post_init__(self):
        if isinstance(self.events, str):
            raise TypeError("events must be a sequence of event names, not a single string")
        events = _ordered_events(self.events)
        if not events:
            raise IllegalStateError("A webhook request needs at least one event")
        object.__setattr__(self, 'events', events)

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the request body, omitting unset optional fields."""
        body: Dict[str, Any] = {}
        if self.name is not None:
            body['name'] = self.name
        if self.url is not None:
            body['url'] = self.url
        body['events'] = list(self.events)
        body['active'] = self.active
        return body


@dataclass(frozen=True)
class WebhookRequestBuilder:
    """Immutable builder for WebhookRequest.

    Each step returns a new builder, so a partially configured builder can be
    shared and extended safely.

    Example:
        >>> request = (WebhookRequestBuilder.a_request_for('repo:refs_changed')
        ...            .with_callback_to('https://ci.example.com/hook')
        ...            .name('ci')
        ...            .build())
    """
    events: Tuple[str, ...]
    url: Optional[str] = None
    webhook_name: Optional[str] = None
    active: bool = True

    def __post_init__(self):
        if isinstance(self.events, str):
            raise TypeError("events must be a sequence of event names, not a single string")
        if not self.events:
            raise IllegalStateError("A webhook request needs at least one event")

    @classmethod
    def a_request_for(cls, *events: str) -> 'WebhookRequestBuilder':
        """Start a builder subscribed to the given events.

        Raises:
            IllegalStateError: If no event is given
        """
        return cls(events=_ordered_events(events))

    def with_callback_to(self, url: str) -> 'WebhookRequestBuilder':
        return replace(self, url=url)

    def name(self, name: str) -> 'WebhookRequestBuilder':
        return replace(self, webhook_name=name)

    def with_is_active(self, active: bool) -> 'WebhookRequestBuilder':
        return replace(self, active=active)

    def build(self) -> WebhookRequest:
        return WebhookRequest(
            events=self.events,
            url=self.url,
            name=self.webhook_name,
            active=self.active,
        )
