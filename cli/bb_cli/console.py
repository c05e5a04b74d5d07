from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console()
err_console = Console(stderr=True)


def print_json(data) -> None:
    console.print_json(data=data)


def err(msg: str) -> None:
    err_console.print(f"[bold red]ERR[/] {escape(msg)}", soft_wrap=True)


def print(*args, **kwargs):
    """Proxy to underlying rich Console.print()."""
    console.print(*args, **kwargs)


def plain(msg: str) -> None:
    console.print(msg, markup=False, highlight=False, soft_wrap=True)
