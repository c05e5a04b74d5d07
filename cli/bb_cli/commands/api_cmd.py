from __future__ import annotations

import typer

from .. import console
from .common import call, open_client, query_params


def api(
        endpoint: str = typer.Argument(..., help="API path (e.g. /user) or absolute URL."),
        method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
        paginate: bool = typer.Option(False, "--paginate", help="Follow pagination and print all values."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        q: str | None = typer.Option(None, "--q", help="Bitbucket q filter."),
        sort: str | None = typer.Option(None, "--sort", help="Sort expression."),
        fields: str | None = typer.Option(None, "--fields", help="Partial fields selector."),
):
    """Call a Bitbucket Cloud REST endpoint and print the JSON response."""
    params = query_params(q=q, sort=sort, fields=fields)
    client = open_client(profile)
    if paginate:
        data = call(client, lambda c: c.get_all_values(endpoint, params))
    else:
        data = call(client, lambda c: c.do_json(method.strip().upper(), endpoint, params))
    console.print_json(data)
