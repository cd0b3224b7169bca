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
"""
Command-line Interface to the Engage integration API.

Each command reads its parameters from a YAML login file given with --login.
"""
import json
import sys

import click
import requests

from engage_tools.core import Configuration, ConfigurationError, Session
from engage_tools.core.logging import get_logger, log_exception
from engage_tools.engage import activity, supporter

logger = get_logger("engage")

login_option = click.option(
    "--login",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with the token, host and other parameters",
)


def load_login(path: str, required: list[str]) -> Configuration:
    try:
        return Configuration.load_from_file(path).validate(required)
    except ConfigurationError as err:
        if not err.missing:
            print(f"Error: {err}")
        print("Too many errors, terminating.")
        sys.exit(1)


@click.group()
def engage():
    pass


@engage.command()
@login_option
def search_donations(login: str):
    """Show the activities modified in a date range."""
    config = load_login(login, activity.REQUIRED_KEYS)
    session = Session.from_config(config)
    cursor = activity.activity_cursor(session, config)
    activity.print_activities(cursor)


@engage.command()
@login_option
def update_custom_field(login: str):
    """Set a custom field on the supporter with a given email."""
    config = load_login(login, supporter.REQUIRED_KEYS)
    session = Session.from_config(config)
    try:
        supporter.update_custom_field(
            session, config["email"], config["fieldName"], config["fieldValue"]
        )
    except supporter.SupporterNotFound as err:
        print(err)
        sys.exit(1)
    except (requests.RequestException, ValueError):
        log_exception(logger, "Updating custom field")
        sys.exit(1)


@engage.command()
@login_option
def lookup_supporter(login: str):
    """Show the supporter record for an email address."""
    config = load_login(login, supporter.LOOKUP_KEYS)
    session = Session.from_config(config)
    try:
        found = supporter.lookup_supporter(session, config["email"])
    except (requests.RequestException, ValueError):
        log_exception(logger, "Looking up supporter")
        sys.exit(1)
    if found is None:
        print(supporter.SupporterNotFound(config["email"]))
        sys.exit(1)
    print(json.dumps(found, indent=4))


if __name__ == "__main__":
    engage()
