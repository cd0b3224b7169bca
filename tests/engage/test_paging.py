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
import pytest

from engage_tools.engage.utils import FetchResult, PagedCursor, PagedRecord


class ScriptedPages:
    """A fake paged source that returns pages of the given sizes in turn."""

    def __init__(self, sizes: list[int]):
        self.sizes = list(sizes)
        self.offsets = []
        self.counts = []

    def __call__(self, offset: int, count: int) -> FetchResult:
        self.offsets.append(offset)
        self.counts.append(count)
        size = self.sizes.pop(0)
        return FetchResult.success([dict(n=offset + i) for i in range(size)])


def test_short_page_costs_one_more_request():
    source = ScriptedPages([20, 20, 7, 0])
    cursor = PagedCursor(source, page_size=20)
    records = list(cursor)
    assert len(records) == 47
    assert cursor.requests == 4
    assert source.offsets == [0, 20, 40, 47]
    assert source.counts == [20, 20, 20, 7]
    assert cursor.offset == 47
    assert cursor.error is None


def test_records_keep_server_order_and_page_index():
    source = ScriptedPages([3, 2, 0])
    records = list(PagedCursor(source, page_size=3))
    assert [r.record["n"] for r in records] == [0, 1, 2, 3, 4]
    assert records[3] == PagedRecord(3, 0, dict(n=3))
    assert [(r.offset, r.index) for r in records] == [
        (0, 0),
        (0, 1),
        (0, 2),
        (3, 0),
        (3, 1),
    ]


def test_empty_first_page():
    source = ScriptedPages([0])
    cursor = PagedCursor(source)
    assert list(cursor) == []
    assert cursor.requests == 1
    assert source.offsets == [0]


def test_failure_stops_the_walk():
    calls = []

    def fetch_page(offset: int, count: int) -> FetchResult:
        calls.append(offset)
        if offset == 0:
            return FetchResult.success([dict(n=i) for i in range(count)])
        return FetchResult.failure(ConnectionError("connection reset"))

    cursor = PagedCursor(fetch_page, page_size=5)
    assert len(list(cursor)) == 5
    assert calls == [0, 5]
    assert isinstance(cursor.error, ConnectionError)
    assert cursor.offset == 5


def test_reported_zero_count_stops_even_with_records():
    def fetch_page(offset: int, count: int) -> FetchResult:
        return FetchResult.success([dict(n=1)], count=0)

    cursor = PagedCursor(fetch_page)
    assert list(cursor) == []
    assert cursor.requests == 1


def test_cursor_is_lazy():
    source = ScriptedPages([2, 2, 0])
    records = iter(PagedCursor(source, page_size=2))
    assert source.offsets == []
    next(records)
    assert source.offsets == [0]


def test_cursor_cannot_restart():
    cursor = PagedCursor(ScriptedPages([0]))
    list(cursor)
    with pytest.raises(RuntimeError):
        iter(cursor)


def test_page_size_must_be_positive():
    with pytest.raises(ValueError):
        PagedCursor(ScriptedPages([0]), page_size=0)


def test_fetch_result():
    ok = FetchResult.success([1, 2])
    assert ok.ok and ok.count == 2
    failed = FetchResult.failure(ValueError("bad"))
    assert not failed.ok
    assert failed.records == [] and failed.count == 0
