"""Unit tests for the requests-backed RequestExecutor.

Timeouts prevent the client from hanging on an unresponsive server.
"""

import pytest
from unittest.mock import Mock
from requests.exceptions import ConnectionError, ConnectTimeout, ReadTimeout, SSLError

from src.bitbucket_client.errors import TransportError
from src.bitbucket_client.http import DEFAULT_TIMEOUT, HttpResponse, RequestsExecutor


@pytest.fixture
def session():
    session = Mock()
    response = Mock()
    response.status_code = 200
    response.content = b'{"ok": true}'
    response.headers = {'Content-Type': 'application/json'}
    session.request.return_value = response
    return session


class TestRequestsExecutor:
    """Test cases for RequestsExecutor."""

    def test_default_timeout(self):
        assert RequestsExecutor().timeout == DEFAULT_TIMEOUT == 30

    def test_execute_returns_raw_response(self, session):
        executor = RequestsExecutor(session=session)

        response = executor.execute('GET', 'http://bb/x', {'Accept': 'application/json'})

        assert response == HttpResponse(200, b'{"ok": true}', {'Content-Type': 'application/json'})

    def test_execute_passes_timeout_and_body(self, session):
        executor = RequestsExecutor(timeout=7, session=session)

        executor.execute('POST', 'http://bb/x', {'Content-Type': 'application/json'}, b'{}')

        session.request.assert_called_once_with(
            'POST',
            'http://bb/x',
            headers={'Content-Type': 'application/json'},
            data=b'{}',
            timeout=7,
        )

    def test_non_2xx_is_not_an_exception(self, session):
        """Status interpretation belongs to the layer above."""
        session.request.return_value.status_code = 500
        response = RequestsExecutor(session=session).execute('GET', 'http://bb/x', {})
        assert response.status_code == 500

    @pytest.mark.parametrize("error", [
        ReadTimeout("read timed out"),
        ConnectTimeout("connect timed out"),
        ConnectionError("Connection refused"),
        SSLError("certificate verify failed"),
    ])
    def test_transport_failures_raise_transport_error(self, session, error):
        session.request.side_effect = error

        with pytest.raises(TransportError) as exc_info:
            RequestsExecutor(session=session).execute('GET', 'http://bb/x', {})

        assert exc_info.value.url == 'http://bb/x'
        assert exc_info.value.__cause__ is error

    def test_timeout_reason_mentions_seconds(self, session):
        session.request.side_effect = ReadTimeout()
        with pytest.raises(TransportError) as exc_info:
            RequestsExecutor(timeout=3, session=session).execute('GET', 'http://bb/x', {})
        assert "3s" in exc_info.value.reason

    def test_response_without_headers(self):
        """Responses built without headers do not share a mutable default."""
        first = HttpResponse(200, b'')
        second = HttpResponse(204, b'')

        assert first.headers is None
        assert second.headers is None

    def test_close_closes_session(self, session):
        RequestsExecutor(session=session).close()
        session.close.assert_called_once()
