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

from .config import Configuration


class Session:
    """An authenticated connection to one Engage API host.

    Every request body is wrapped as `{"payload": ...}` and every response
    body is unwrapped the same way, so callers only deal in payloads."""

    def __init__(self, host: str, token: str):
        self.base_url = host.rstrip("/")
        self.http = requests.session()
        self.http.headers["authToken"] = token
        self.http.headers["Content-Type"] = "application/json"

    @classmethod
    def from_config(cls, config: Configuration) -> "Session":
        return cls(config["host"], config["token"])

    def post(self, command: str, payload: dict) -> dict:
        return self.request("POST", command, payload)

    def put(self, command: str, payload: dict) -> dict:
        return self.request("PUT", command, payload)

    def request(self, method: str, command: str, payload: dict) -> dict:
        response = self.http.request(
            method, self.base_url + command, json={"payload": payload}
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict) or not isinstance(body.get("payload"), dict):
            raise ValueError(f"No payload in response from {command}: {body}")
        return body["payload"]
