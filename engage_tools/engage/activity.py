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
import requests

from .utils import (
    ACTIVITY_SEARCH,
    DEFAULT_PAGE_SIZE,
    MODIFIED_TO_FIELD,
    FetchResult,
    PagedCursor,
)
from ..core import Configuration, Session
from ..core.logging import get_logger, log_exception

logger = get_logger(__name__)

REQUIRED_KEYS = ["token", "host", "identifierType", "modifiedFrom", "modifiedTo"]


class Activity(dict):
    """A donation (or other) activity as returned by the search endpoint.

    Activities are only ever displayed, never sent back."""

    summary_fields = [
        "activityId",
        "activityFormName",
        "activityDate",
        "activityType",
        "donationId",
        "totalReceivedAmount",
    ]

    def summary(self) -> list[str]:
        return [_text(self.get(field)) for field in self.summary_fields]


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def search_activities(
    session: Session, config: Configuration, offset: int, count: int
) -> FetchResult:
    """Fetch one page of activities.  Failures come back as a failed result."""
    payload = {
        "type": config["identifierType"],
        "modifiedFrom": config["modifiedFrom"],
        config.get("modifiedToField", MODIFIED_TO_FIELD): config["modifiedTo"],
        "offset": offset,
        "count": count,
    }
    try:
        body = session.post(ACTIVITY_SEARCH, payload)
        reported = int(body["count"])
        activities = (body.get("activities") or []) if reported else []
        records = [Activity(data) for data in activities]
    except (requests.RequestException, ValueError, KeyError, TypeError) as err:
        log_exception(logger, "Searching activities")
        print(f"Caught exception: {err}")
        return FetchResult.failure(err)
    return FetchResult.success(records, reported)


def activity_cursor(
    session: Session, config: Configuration, page_size: int = None
) -> PagedCursor:
    if not page_size:
        page_size = int(config.get("pageSize", DEFAULT_PAGE_SIZE))

    def fetch_page(offset: int, count: int) -> FetchResult:
        return search_activities(session, config, offset, count)

    return PagedCursor(fetch_page, page_size)


def format_activity(offset: int, index: int, activity: dict) -> str:
    if not isinstance(activity, Activity):
        activity = Activity(activity)
    return "[%3d:%3d] %s %-30s %s %s %s %s" % (offset, index, *activity.summary())


def print_activities(cursor: PagedCursor) -> int:
    """Print every activity the cursor finds, then the end-of-search line.

    Returns the number of activities printed."""
    total = 0
    for offset, index, activity in cursor:
        print(format_activity(offset, index, activity))
        total += 1
    print("[%5d:00] end of search" % cursor.offset)
    return total
