"""HTTP transport used by the Bitbucket request executor.

The RequestExecutor is the single seam through which every request leaves the
client. It sends exactly what it is given and reports the raw status and body;
status interpretation, JSON decoding and credentials belong to the layer above.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, NamedTuple, Optional

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from .errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class HttpResponse(NamedTuple):
    """Raw response returned by a RequestExecutor.

    headers is None when the transport does not report them.
    """
    status_code: int
    body: bytes
    headers: Optional[Dict[str, str]] = None


class RequestExecutor(ABC):
    """Sends one HTTP request and returns the raw response."""

    @abstractmethod
    def execute(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> HttpResponse:
        """Send a request.

        Raises:
            TransportError: If the server could not be reached or timed out
        """


class RequestsExecutor(RequestExecutor):
    """RequestExecutor backed by a requests Session.

    Args:
        timeout: Seconds to wait for connect and read (prevents hangs)
        session: Optional pre-configured session (proxies, CA bundle)
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self._session = session or requests.Session()

    def execute(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
    ) -> HttpResponse:
        try:
            response = self._session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=self.timeout,
            )
        except Timeout as e:
            logger.warning(f"{method} request timed out after {self.timeout}s")
            raise TransportError(url, f"timed out after {self.timeout}s") from e
        except ConnectionError as e:
            raise TransportError(url, "connection failed") from e
        except RequestException as e:
            raise TransportError(url, type(e).__name__) from e

        return HttpResponse(
            status_code=response.status_code,
            body=response.content,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        """Close the underlying session and its pooled connections."""
        self._session.close()
