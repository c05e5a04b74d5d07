from __future__ import annotations

from typing import Any, Iterable

from rich.table import Table
from rich.text import Text

OUTPUT_TABLE = "table"
OUTPUT_JSON = "json"
OUTPUT_TEXT = "text"


class OutputError(Exception):
    """A listing row could not be rendered."""


def dig(obj: Any, *keys: str) -> Any:
    cur = obj
    for key in keys:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _rows(values: Iterable[Any], kind: str) -> Iterable[dict[str, Any]]:
    for row in values:
        if not isinstance(row, dict):
            raise OutputError(f"decode {kind} row: expected JSON object, got {type(row).__name__}")
        yield row


def _add_row(table: Table, *cells: str) -> None:
    table.add_row(*(Text(cell) for cell in cells))


def _table(*columns: str) -> Table:
    table = Table(box=None, show_edge=False, pad_edge=False, header_style="bold")
    for col in columns:
        table.add_column(col, overflow="fold")
    return table


def pipeline_state_label(row: dict[str, Any]) -> str:
    result = text(dig(row, "state", "result", "name")).strip()
    if result:
        return result
    return text(dig(row, "state", "name"))


def repo_table(values: list[Any]) -> Table:
    table = _table("SLUG", "FULL_NAME")
    for row in _rows(values, "repo"):
        _add_row(table, text(row.get("slug")), text(row.get("full_name")))
    return table


def pull_request_table(values: list[Any]) -> Table:
    table = _table("ID", "STATE", "SOURCE", "DEST", "TITLE")
    for row in _rows(values, "pull request"):
        _add_row(
            table,
            text(row.get("id")),
            text(row.get("state")),
            text(dig(row, "source", "branch", "name")),
            text(dig(row, "destination", "branch", "name")),
            text(row.get("title")),
        )
    return table


def pipeline_table(values: list[Any]) -> Table:
    table = _table("UUID", "STATE", "REF")
    for row in _rows(values, "pipeline"):
        _add_row(table, text(row.get("uuid")), pipeline_state_label(row), text(dig(row, "target", "ref_name")))
    return table


def issue_table(values: list[Any]) -> Table:
    table = _table("ID", "STATE", "KIND", "PRIORITY", "TITLE")
    for row in _rows(values, "issue"):
        _add_row(
            table,
            text(row.get("id")),
            text(row.get("state")),
            text(row.get("kind")),
            text(row.get("priority")),
            text(row.get("title")),
        )
    return table


def wiki_table(pages: list[Any]) -> Table:
    table = _table("PATH", "SIZE")
    for page in pages:
        _add_row(table, page.path, str(page.size))
    return table


def html_link(row: dict[str, Any]) -> str:
    return text(dig(row, "links", "html", "href")).strip()
