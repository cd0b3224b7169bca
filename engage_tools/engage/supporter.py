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
from typing import Optional

from .utils import SUPPORTER_SEARCH, SUPPORTER_UPDATE
from ..core import Session
from ..core.logging import get_logger

logger = get_logger(__name__)

REQUIRED_KEYS = ["token", "host", "email", "fieldName", "fieldValue"]
LOOKUP_KEYS = ["token", "host", "email"]

EMAIL_ADDRESS = "EMAIL_ADDRESS"
FOUND = "FOUND"
LOOKUP_COUNT = 10


class SupporterNotFound(LookupError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Sorry, can't find supporter for '{email}'.")


class CustomFieldValue(dict):
    """One custom field on a supporter.  The API may attach `errors` to it."""

    @property
    def name(self) -> str:
        return self.get("name", "")

    @property
    def has_errors(self) -> bool:
        return "errors" in self and bool(self["errors"])

    @property
    def first_error_message(self) -> Optional[str]:
        if not self.has_errors:
            return None
        error = self["errors"][0]
        return error.get("message", "") if isinstance(error, dict) else str(error)

    def display_lines(self) -> list[str]:
        field_id, name, type_, value = (
            _text(self.get(key)) for key in ("fieldId", "name", "type", "value")
        )
        lines = [f"\t{field_id} {name} {type_} = '{value}'"]
        if self.has_errors:
            lines.append(f"\t*** {self.first_error_message}")
        return lines


class Supporter(dict):
    """A supporter record, kept whole so it can be sent back on update."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if isinstance(self.get("customFieldValues"), list):
            self["customFieldValues"] = [
                CustomFieldValue(cf) for cf in self["customFieldValues"]
            ]

    @property
    def is_found(self) -> bool:
        return self.get("result") == FOUND

    @property
    def custom_field_values(self) -> list[CustomFieldValue]:
        return self.get("customFieldValues") or []

    def set_custom_field(self, name: str, value) -> bool:
        """Overwrite the value of the first custom field called `name`.

        Returns whether a field was found.  Nothing else on the record changes."""
        for cf in self.custom_field_values:
            if cf.get("name") == name:
                cf["value"] = value
                return True
        logger.debug(f"No custom field named '{name}' on supporter")
        return False


def _text(value) -> str:
    return "" if value is None else str(value)


def lookup_supporter(session: Session, email: str) -> Optional[Supporter]:
    """Find the supporter with this email, or None if the API doesn't find one.

    Only the first entry of the response is consulted."""
    payload = {
        "count": LOOKUP_COUNT,
        "offset": 0,
        "identifiers": [email],
        "identifierType": EMAIL_ADDRESS,
    }
    body = session.post(SUPPORTER_SEARCH, payload)
    supporters = body.get("supporters") or []
    if not supporters:
        logger.info(f"Supporter search for '{email}' returned no entries")
        return None
    supporter = Supporter(supporters[0])
    if not supporter.is_found:
        logger.info(f"Supporter search for '{email}' returned '{supporter.get('result')}'")
        return None
    return supporter


def update_supporter(session: Session, supporter: Supporter) -> Optional[Supporter]:
    """Send the whole supporter back, returning the API's echo of it (if any)."""
    body = session.put(SUPPORTER_UPDATE, {"supporters": [supporter]})
    supporters = body.get("supporters") or []
    return Supporter(supporters[0]) if supporters else None


def print_custom_fields(supporter: Supporter):
    for cf in supporter.custom_field_values:
        for line in cf.display_lines():
            print(line)


def print_field_errors(supporter: Optional[Supporter]) -> int:
    """Print only the custom fields that came back with errors; return how many."""
    if supporter is None:
        return 0
    count = 0
    for cf in supporter.custom_field_values:
        if cf.has_errors:
            for line in cf.display_lines():
                print(line)
            count += 1
    return count


def update_custom_field(
    session: Session, email: str, field_name: str, field_value
) -> Supporter:
    """Look up a supporter, change one custom field, and show the result.

    "Before" shows the record as it will be sent, with the new value in
    place.  The record printed under "After" comes from a fresh lookup
    rather than from the update response."""
    supporter = lookup_supporter(session, email)
    if supporter is None:
        raise SupporterNotFound(email)
    supporter.set_custom_field(field_name, field_value)
    print("\nBefore:")
    print_custom_fields(supporter)
    response = update_supporter(session, supporter)
    print("\nError analysis:")
    errors = print_field_errors(response)
    if errors:
        logger.info(f"Update reported errors on {errors} custom field(s)")
    print("\nAfter:")
    supporter = lookup_supporter(session, email)
    if supporter is None:
        raise SupporterNotFound(email)
    print_custom_fields(supporter)
    return supporter
