from __future__ import annotations

import typer

from .. import console
from ..formatting import OUTPUT_JSON, OUTPUT_TABLE, OUTPUT_TEXT, html_link, pull_request_table, text
from .common import call, check_output, fail, open_client, print_listing, query_params, repo_target

app = typer.Typer(help="Pull request operations.", no_args_is_help=True)


@app.command("list")
def list_prs(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        output: str = typer.Option(OUTPUT_TABLE, "--output", "-o", help="Output format: table|json."),
        all_pages: bool = typer.Option(False, "--all", help="Fetch all pages."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        state: str | None = typer.Option(None, "--state", help="State filter (OPEN|MERGED|DECLINED)."),
        q: str | None = typer.Option(None, "--q", help="Bitbucket q filter."),
        sort: str | None = typer.Option(None, "--sort", help="Sort expression."),
        fields: str | None = typer.Option(None, "--fields", help="Partial fields selector."),
):
    output = check_output(output, (OUTPUT_TABLE, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    params = query_params(state=(state or "").upper(), q=q, sort=sort, fields=fields)

    client = open_client(profile)
    values = call(client, lambda c: c.pull_requests(ws, rp, params=params, all_pages=all_pages))
    print_listing(values, output, pull_request_table)


@app.command("create")
def create_pr(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        title: str = typer.Option("", "--title", help="Pull request title."),
        source: str = typer.Option("", "--source", help="Source branch name."),
        destination: str = typer.Option("", "--destination", help="Destination branch name."),
        description: str | None = typer.Option(None, "--description", help="Pull request description."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        output: str = typer.Option(OUTPUT_TEXT, "--output", "-o", help="Output format: text|json."),
):
    output = check_output(output, (OUTPUT_TEXT, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    for flag, value in (("--title", title), ("--source", source), ("--destination", destination)):
        if not value.strip():
            fail(f"{flag} is required")

    client = open_client(profile)
    created = call(
        client,
        lambda c: c.create_pull_request(
            ws,
            rp,
            title=title,
            source=source,
            destination=destination,
            description=description,
        ),
    )

    if output == OUTPUT_JSON:
        console.print_json(created)
        return
    console.plain(f"Created PR #{text(created.get('id'))} ({text(created.get('state'))}): {text(created.get('title'))}")
    link = html_link(created)
    if link:
        console.plain(f"URL: {link}")
