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
import os

import pytest
import yaml


#
# mark slow tests
#
def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False, help="run slow tests"
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        # --run-slow given: do not skip slow tests
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


#
# testing fixtures
#
class FakeSession:
    """Stands in for `engage_tools.core.Session`, replaying canned payloads.

    Each entry in `replies` is either a payload dict or an exception to raise.
    Every request is recorded in `calls` as (method, command, payload)."""

    def __init__(self, replies: list):
        self.replies = list(replies)
        self.calls = []

    def post(self, command: str, payload: dict) -> dict:
        return self.request("POST", command, payload)

    def put(self, command: str, payload: dict) -> dict:
        return self.request("PUT", command, payload)

    def request(self, method: str, command: str, payload: dict) -> dict:
        self.calls.append((method, command, payload))
        if not self.replies:
            raise AssertionError(f"Unexpected {method} to {command}")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def fake_session():
    return FakeSession


@pytest.fixture()
def write_login(tmp_path):
    """Write a login file from a dict and return its path."""

    def write(data, name: str = "login.yaml") -> str:
        path = tmp_path / name
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return str(path)

    return write


@pytest.fixture()
def search_login() -> dict:
    return dict(
        token="test-token",
        host="https://api.example.org",
        identifierType="FUNDRAISE",
        modifiedFrom="2018-07-01T00:00:00.000Z",
        modifiedTo="2018-07-31T23:59:59.999Z",
    )


@pytest.fixture()
def update_login() -> dict:
    return dict(
        token="test-token",
        host="https://api.example.org",
        email="someone@example.org",
        fieldName="Favorite color",
        fieldValue="green",
    )


@pytest.fixture()
def live_login() -> str:
    """Path to a login file for a real Engage host, used by slow tests."""
    path = os.getenv("ENGAGE_TEST_LOGIN")
    if not path or not os.path.isfile(path):
        pytest.skip("ENGAGE_TEST_LOGIN must name a login file")
    return path
