"""Core REST client for the Bitbucket Server REST API.

This module composes a RequestExecutor with a credential policy. It builds
request URLs from the base URL, path segments and percent-encoded query
parameters, sends JSON bodies, decodes JSON responses through a caller-supplied
parser and translates non-2xx responses to the typed exception hierarchy.
"""

import json
import logging
import re
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Tuple, TypeVar, Union
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from .auth import ANONYMOUS_CREDENTIALS, Credentials
from .errors import (
    ConflictError,
    FieldError,
    ForbiddenError,
    HttpError,
    NotFoundError,
    ResponseParseError,
    ServerError,
    UnauthorizedError,
    UnknownError,
    ValidationError,
)
from .http import HttpResponse, RequestExecutor

logger = logging.getLogger(__name__)

T = TypeVar('T')

QueryParams = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]

API_PATH = 'rest/api/1.0'

STATUS_ERRORS = {
    400: ValidationError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def encode_query(params: Optional[QueryParams]) -> str:
    """Percent-encode query parameters, keeping repeated names in order.

    Example:
        >>> encode_query([('event', 'repo:refs_changed'), ('event', 'pr:merged')])
        'event=repo%3Arefs_changed&event=pr%3Amerged'
    """
    if not params:
        return ''
    pairs: Iterable[Tuple[str, Any]] = params.items() if isinstance(params, Mapping) else params
    return urlencode(
        [(name, str(value)) for name, value in pairs if value is not None],
        quote_via=quote,
        safe='',
    )


def with_query_param(url: str, name: str, value: Any) -> str:
    """Return url with the query parameter name set to value.

    Any existing values for name are replaced; all other parameters keep
    their order and repetition.
    """
    parts = urlsplit(url)
    pairs = [
        (key, val) for key, val in parse_qsl(parts.query, keep_blank_values=True)
        if key != name
    ]
    pairs.append((name, value))
    return urlunsplit(parts._replace(query=encode_query(pairs)))


def sanitize(text: str) -> str:
    """Mask credentials that may appear in URLs or error text before logging."""
    if not text:
        return text

    sanitized = re.sub(r'://([^/:@\s]+):([^/@\s]+)@', r'://***:***@', text)
    sanitized = re.sub(
        r'Authorization:\s*[^\n\r]+',
        'Authorization: ***REDACTED***',
        sanitized,
        flags=re.IGNORECASE
    )
    sanitized = re.sub(
        r'(Bearer|Basic)\s+[^\s\n\r]+',
        r'\1 ***REDACTED***',
        sanitized,
        flags=re.IGNORECASE
    )
    return sanitized


class BitbucketRequestExecutor:
    """Issues authenticated JSON requests against one Bitbucket server.

    Instances hold only immutable configuration and may be shared by any
    number of resource clients.

    Example:
        >>> executor = BitbucketRequestExecutor(
        ...     'https://bitbucket.example.com', RequestsExecutor(), TokenCredentials('abc'))
        >>> url = executor.build_url('projects', 'PROJ', 'repos', params={'start': 25})
        >>> page = executor.get(url)
    """

    def __init__(
        self,
        base_url: str,
        request_executor: RequestExecutor,
        credentials: Credentials = ANONYMOUS_CREDENTIALS,
    ):
        """Initialize the executor.

        Args:
            base_url: Server root, e.g. https://bitbucket.example.com/context
            request_executor: Transport that sends the requests
            credentials: Credential policy applied to every request
        """
        self.base_url = base_url.rstrip('/')
        self._request_executor = request_executor
        self._credentials = credentials

    def build_url(self, *path_segments: Any, params: Optional[QueryParams] = None) -> str:
        """Build an API URL from path segments and query parameters.

        Args:
            *path_segments: Path segments below rest/api/1.0; each is percent-encoded
            params: Query parameters as a mapping or a sequence of (name, value)
                pairs; repeated names are sent repeatedly, None values are skipped

        Returns:
            Absolute URL string
        """
        path = '/'.join(quote(str(segment), safe='') for segment in path_segments)
        url = f"{self.base_url}/{API_PATH}"
        if path:
            url = f"{url}/{path}"
        query = encode_query(params)
        if query:
            url = f"{url}?{query}"
        return url

    def get(self, url: str, parser: Optional[Callable[[Any], T]] = None) -> T:
        """GET url and return the decoded body, passed through parser if given."""
        return self._send('GET', url, None, parser)

    def post(self, url: str, body: Any, parser: Optional[Callable[[Any], T]] = None) -> T:
        """POST body as JSON and return the decoded response."""
        return self._send('POST', url, body, parser)

    def put(self, url: str, body: Any, parser: Optional[Callable[[Any], T]] = None) -> T:
        """PUT body as JSON and return the decoded response."""
        return self._send('PUT', url, body, parser)

    def delete(self, url: str) -> None:
        """DELETE url. Succeeds silently on any 2xx status."""
        self._send('DELETE', url, None, None)

    def _send(
        self,
        method: str,
        url: str,
        body: Any,
        parser: Optional[Callable[[Any], Any]],
    ) -> Any:
        headers = {'Accept': 'application/json'}
        payload = None
        if body is not None:
            headers['Content-Type'] = 'application/json'
            payload = json.dumps(body).encode('utf-8')
        headers = self._credentials.apply_to(headers)

        logger.debug(f"{method} {sanitize(url)}")
        response = self._request_executor.execute(method, url, headers, payload)

        if not 200 <= response.status_code < 300:
            raise self._translate_error(response, url)

        return self._decode(response, url, parser)

    def _decode(
        self,
        response: HttpResponse,
        url: str,
        parser: Optional[Callable[[Any], Any]],
    ) -> Any:
        """Decode a 2xx body as JSON and apply the parser.

        Raises:
            ResponseParseError: If the body is not JSON or does not fit the parser
        """
        if not response.body or not response.body.strip():
            data = None
        else:
            try:
                data = json.loads(response.body)
            except ValueError as e:
                raise ResponseParseError(sanitize(url), f"invalid JSON ({e})") from e

        if parser is None:
            return data

        try:
            return parser(data)
        except ResponseParseError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ResponseParseError(sanitize(url), f"{type(e).__name__}: {e}") from e

    def _translate_error(self, response: HttpResponse, url: str) -> HttpError:
        """Map a non-2xx response to a typed HttpError."""
        status = response.status_code
        safe_url = sanitize(url)
        message, field_errors = _read_error_body(response.body)

        if status == 400:
            error: HttpError = ValidationError(status, safe_url, message, field_errors)
        elif status in STATUS_ERRORS:
            error = STATUS_ERRORS[status](status, safe_url, message)
        elif 500 <= status < 600:
            error = ServerError(status, safe_url, message)
        else:
            error = UnknownError(status, safe_url, message)

        logger.debug(f"{type(error).__name__}: {sanitize(str(error))}")
        return error


def _read_error_body(body: bytes) -> Tuple[Optional[str], list]:
    """Extract the message and field errors from a Bitbucket error body.

    Bitbucket reports errors as {"errors": [{"context": ..., "message": ...}]}.
    Bodies that are not in this shape yield (None, []).
    """
    try:
        data = json.loads(body) if body else None
    except ValueError:
        return None, []

    if not isinstance(data, dict) or not isinstance(data.get('errors'), list):
        return None, []

    field_errors = [
        FieldError(context=item.get('context'), message=str(item.get('message', '')))
        for item in data['errors']
        if isinstance(item, dict)
    ]
    message = '; '.join(e.message for e in field_errors if e.message) or None
    return message, field_errors
