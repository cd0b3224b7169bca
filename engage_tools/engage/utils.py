#  MIT License
#
#  Copyright (c) 2022 Daniel C. Brotsky
#
#  Permission is hereby granted, free of charge, to any person obtaining a copy
#  of this software and associated documentation files (the "Software"), to deal
#  in the Software without restriction, including without limitation the rights
#  to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
#  copies of the Software, and to permit persons to whom the Software is
#  furnished to do so, subject to the following conditions:
#
#  The above copyright notice and this permission notice shall be included in all
#  copies or substantial portions of the Software.
#
#  THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
#  IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
#  FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
#  AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
#  LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
#  OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
#  SOFTWARE.
#
from typing import Callable, Iterator, NamedTuple, Optional

from ..core.logging import get_logger

logger = get_logger(__name__)

ACTIVITY_SEARCH = "/api/integration/ext/v1/activities/search"
SUPPORTER_SEARCH = "/api/integration/ext/v1/supporters/search"
SUPPORTER_UPDATE = "/api/integration/ext/v1/supporters"

DEFAULT_PAGE_SIZE = 20

# Wire name of the upper date bound in an activity search.  Older clients
# sent "modidifedTo"; a login file can pick either with `modifiedToField`.
MODIFIED_TO_FIELD = "modifiedTo"


class FetchResult(NamedTuple):
    """The outcome of fetching one page: either records or the error that stopped us."""

    records: list
    count: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, records: list, count: int = None) -> "FetchResult":
        return cls(records, len(records) if count is None else count)

    @classmethod
    def failure(cls, error: Exception) -> "FetchResult":
        return cls([], 0, error)


class PagedRecord(NamedTuple):
    offset: int
    index: int
    record: dict


class PagedCursor:
    """Walk an offset/count search endpoint one page at a time.

    The cursor asks `fetch_page(offset, count)` for successive windows.
    The offset advances by the number of records actually returned, and
    the next window asks for that many records again.  The walk ends on
    the first page that reports zero records or fails; a short page does
    not end it by itself, so the last request is always an empty one.

    A cursor can be iterated only once.  After iteration `offset` holds
    the total number of records seen, `requests` the number of pages
    asked for, and `error` the failure that ended the walk (if any)."""

    def __init__(
        self,
        fetch_page: Callable[[int, int], FetchResult],
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        if page_size <= 0:
            raise ValueError(f"Page size must be positive: {page_size}")
        self.fetch_page = fetch_page
        self.offset = 0
        self.count = page_size
        self.requests = 0
        self.error: Optional[Exception] = None
        self.started = False

    def __iter__(self) -> Iterator[PagedRecord]:
        if self.started:
            raise RuntimeError("A paged cursor cannot be restarted")
        self.started = True
        return self._walk()

    def _walk(self) -> Iterator[PagedRecord]:
        while self.count > 0:
            result = self.fetch_page(self.offset, self.count)
            self.requests += 1
            if not result.ok:
                self.error = result.error
                logger.error(f"Search stopped at offset {self.offset}: {result.error}")
                break
            if result.count == 0 or not result.records:
                break
            logger.debug(
                f"Processing {len(result.records)} records at offset {self.offset}..."
            )
            for index, record in enumerate(result.records):
                yield PagedRecord(self.offset, index, record)
            self.count = len(result.records)
            self.offset += self.count
        logger.debug(f"Fetched {self.offset} records in {self.requests} request(s).")
