from __future__ import annotations

import typer

from ..formatting import OUTPUT_JSON, OUTPUT_TABLE, repo_table
from .common import call, check_output, open_client, print_listing, query_params, repo_target

app = typer.Typer(help="Repository operations.", no_args_is_help=True)


@app.command("list")
def list_repos(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        output: str = typer.Option(OUTPUT_TABLE, "--output", "-o", help="Output format: table|json."),
        all_pages: bool = typer.Option(False, "--all", help="Fetch all pages."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        q: str | None = typer.Option(None, "--q", help="Bitbucket q filter."),
        sort: str | None = typer.Option(None, "--sort", help="Sort expression."),
        fields: str | None = typer.Option(None, "--fields", help="Partial fields selector."),
):
    output = check_output(output, (OUTPUT_TABLE, OUTPUT_JSON))
    ws, _ = repo_target(workspace, None, require_repo=False)
    params = query_params(q=q, sort=sort, fields=fields)

    client = open_client(profile)
    values = call(client, lambda c: c.repositories(ws, params=params, all_pages=all_pages))
    print_listing(values, output, repo_table)
