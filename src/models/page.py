"""Bitbucket page data model."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class Page(Generic[T]):
    """One server-paginated slice of a collection.

    Attributes:
        values: Items of this page, in server order
        size: Number of items in this page
        limit: Page size requested by the server
        start: Offset of the first item of this page
        is_last_page: True when no further page exists
        next_page_start: Offset of the next page (None on the last page)
    """
    values: Tuple[T, ...]
    size: int
    limit: int
    start: int
    is_last_page: bool
    next_page_start: Optional[int] = None

    def __post_init__(self):
        if self.is_last_page and self.next_page_start is not None:
            object.__setattr__(self, 'next_page_start', None)

    @classmethod
    def from_json(cls, data: Dict[str, Any], value_parser: Callable[[Any], T]) -> 'Page[T]':
        """Decode a Bitbucket page response.

        Args:
            data: Decoded JSON object with size, limit, isLastPage, start,
                nextPageStart and values
            value_parser: Converts each raw value into a model object

        Raises:
            ValueError: If the page metadata is missing or inconsistent
            TypeError: If data is not a JSON object
        """
        if not isinstance(data, dict):
            raise TypeError(f"page must be a JSON object, got {type(data).__name__}")

        raw_values = data.get('values')
        if not isinstance(raw_values, list):
            raise ValueError("page 'values' must be a list")

        is_last_page = data.get('isLastPage')
        if not isinstance(is_last_page, bool):
            raise ValueError("page 'isLastPage' must be a boolean")

        next_page_start = data.get('nextPageStart')
        if not is_last_page and next_page_start is None:
            raise ValueError("page is not the last page but has no 'nextPageStart'")

        values = tuple(value_parser(value) for value in raw_values)
        size = int(data.get('size', len(values)))
        return cls(
            values=values,
            size=size,
            limit=int(data.get('limit', size)),
            start=int(data.get('start', 0)),
            is_last_page=is_last_page,
            next_page_start=None if is_last_page else int(next_page_start),
        )
