from __future__ import annotations

from importlib import metadata

DIST_NAME = "bb-cli"


def cli_version() -> str:
    try:
        return metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.1"


def user_agent() -> str:
    return f"bb-cli/{cli_version()}"
