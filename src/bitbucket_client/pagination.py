"""Lazy traversal of Bitbucket's start-index pagination.

Bitbucket collection endpoints return one page at a time together with
isLastPage and nextPageStart. NextPageFetcher turns a page into the following
page; stream_pages and stream_values turn a first page into a forward-only,
pull-based stream that performs one HTTP call per page boundary and none
before the consumer asks for it.

The fetcher trusts the server's nextPageStart values. A server that reports
a non-advancing nextPageStart on a page that is never last would make the
stream fetch forever.
"""

import logging
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

from src.models.page import Page

from .errors import IllegalStateError
from .request_executor import BitbucketRequestExecutor, sanitize, with_query_param

logger = logging.getLogger(__name__)

T = TypeVar('T')

# Called as retry(func, *args); see retry_logic.retry_on_rate_limit
RetryPolicy = Callable[..., Any]


class NextPageFetcher(Generic[T]):
    """Fetches the page following a given page of the same query.

    Args:
        url: URL of the query, including its filters but no start parameter
        request_executor: Executor used to issue the GET
        value_parser: Converts each raw page value into a model object
        retry: Optional policy wrapped around every page request
    """

    def __init__(
        self,
        url: str,
        request_executor: BitbucketRequestExecutor,
        value_parser: Callable[[Any], T],
        retry: Optional[RetryPolicy] = None,
    ):
        self.url = url
        self._request_executor = request_executor
        self._value_parser = value_parser
        self._retry = retry

    def first_page(self) -> Page[T]:
        """Fetch the page at the query URL itself."""
        return self._get_page(self.url)

    def next(self, page: Page[T]) -> Page[T]:
        """Fetch the page after page.

        Raises:
            IllegalStateError: If page is the last page; no request is made
        """
        if page.is_last_page or page.next_page_start is None:
            raise IllegalStateError("Last page does not have next page")

        url = with_query_param(self.url, 'start', page.next_page_start)
        logger.debug(f"Fetching page starting at {page.next_page_start}: {sanitize(url)}")
        return self._get_page(url)

    def _parse_page(self, data: Any) -> Page[T]:
        return Page.from_json(data, self._value_parser)

    def _get_page(self, url: str) -> Page[T]:
        if self._retry is None:
            return self._request_executor.get(url, self._parse_page)
        return self._retry(self._request_executor.get, url, self._parse_page)


def stream_pages(first_page: Page[T], fetcher: NextPageFetcher[T]) -> Iterator[Page[T]]:
    """Yield first_page and every following page until the last one.

    The next page is fetched only when the consumer asks for it.
    """
    page = first_page
    yield page
    while not page.is_last_page:
        page = fetcher.next(page)
        yield page


def stream_values(first_page: Page[T], fetcher: NextPageFetcher[T]) -> Iterator[T]:
    """Yield the values of first_page and every following page, in order."""
    for page in stream_pages(first_page, fetcher):
        yield from page.values


def fetch_all(
    request_executor: BitbucketRequestExecutor,
    url: str,
    value_parser: Callable[[Any], T],
    retry: Optional[RetryPolicy] = None,
) -> Iterator[T]:
    """Fetch the first page of url now and return a lazy stream over all values.

    The first request is issued before returning, so errors for the query
    itself surface at the call site rather than on first iteration. When retry
    is given it wraps the first request and every later page request.
    """
    fetcher = NextPageFetcher(url, request_executor, value_parser, retry)
    return stream_values(fetcher.first_page(), fetcher)
