from __future__ import annotations

from typing import Any, Callable, NoReturn

import typer
from bitbucket_client import BitbucketClient, BitbucketClientError

from .. import console
from ..config import ConfigError
from ..formatting import OUTPUT_JSON, OutputError
from ..http import make_client
from ..repo_target import TargetError, resolve_repo_target


def fail(msg: str) -> NoReturn:
    console.err(msg)
    raise typer.Exit(code=1)


def check_output(output: str, allowed: tuple[str, ...]) -> str:
    value = (output or "").strip().lower()
    if value not in allowed:
        fail(f"unsupported output format: {output}")
    return value


def query_params(**values: str | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in values.items():
        trimmed = (value or "").strip()
        if trimmed:
            params[key] = trimmed
    return params


def repo_target(workspace: str | None, repo: str | None, *, require_repo: bool = True) -> tuple[str, str]:
    try:
        return resolve_repo_target(workspace, repo, require_repo=require_repo)
    except TargetError as e:
        fail(str(e))


def open_client(profile: str | None) -> BitbucketClient:
    try:
        return make_client(profile)
    except ConfigError as e:
        fail(str(e))


def call(client: BitbucketClient, fn: Callable[[BitbucketClient], Any]) -> Any:
    """Run one API interaction, report client errors and always close the client."""
    try:
        return fn(client)
    except BitbucketClientError as e:
        fail(str(e))
    finally:
        client.close()


def print_listing(values: list[Any], output: str, render_table: Callable[[list[Any]], Any]) -> None:
    if output == OUTPUT_JSON:
        console.print_json(values)
        return
    try:
        table = render_table(values)
    except OutputError as e:
        fail(str(e))
    console.print(table)
