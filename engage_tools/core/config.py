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
from os import getenv
from typing import ClassVar, Iterable

import yaml


class LoginLoader(yaml.SafeLoader):
    """A safe loader that leaves timestamps as the strings they were written as."""


LoginLoader.yaml_implicit_resolvers = {
    first: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class ConfigurationError(ValueError):
    """A login file that is unreadable or is missing required keys."""

    def __init__(self, path: str, missing: list[str] = None, message: str = None):
        self.path = path
        self.missing = list(missing or [])
        if not message:
            keys = ", ".join(self.missing)
            message = f"{path} is missing required keys: {keys}"
        super().__init__(message)


class Configuration(dict):
    """Login parameters for one run of a command, loaded from a YAML file.

    A configuration is built once per command and handed to everything
    that needs it.  Keys are the ones found in the file; the command
    decides which of them are required (see `validate`)."""

    _env: ClassVar[str] = "DEV"

    def __init__(self, *args, path: str = "", **kwargs):
        self.path = path
        super().__init__(*args, **kwargs)

    @classmethod
    def get_env(cls) -> str:
        return cls._env

    @classmethod
    def set_env(cls, new: str):
        if new.upper() not in ["DEV", "STG", "PRD"]:
            raise ValueError(f"Environment ('{new.upper()}') must be DEV, STG, or PRD")
        cls._env = new.upper()

    @classmethod
    def load_from_file(cls, path: str) -> "Configuration":
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.load(f, Loader=LoginLoader)
        except yaml.YAMLError as err:
            raise ConfigurationError(path, message=f"{path} is not valid YAML: {err}")
        except (UnicodeDecodeError, OSError) as err:
            raise ConfigurationError(path, message=f"Can't read {path}: {err}")
        if not isinstance(data, dict):
            raise ConfigurationError(
                path, message=f"No configuration dictionary in {path}: {repr(data)}"
            )
        return cls(data, path=path)

    def missing_keys(self, required: Iterable[str]) -> list[str]:
        """The required keys that are absent, in the order given.

        A key whose value is empty in the YAML file (null) counts as absent."""
        return [key for key in required if self.get(key) is None]

    def validate(self, required: Iterable[str]) -> "Configuration":
        """Check every required key, reporting each missing one on the console.

        Raises a `ConfigurationError` listing all the missing keys once
        they have all been reported."""
        missing = self.missing_keys(required)
        for key in missing:
            print(f"Error: {self.path} must contain a {key}.")
        if missing:
            raise ConfigurationError(self.path, missing)
        return self


if env := getenv("ENGAGE_ENV"):
    Configuration.set_env(env)
