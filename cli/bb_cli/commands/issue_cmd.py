from __future__ import annotations

from typing import Any

import typer
from bitbucket_client.client import issue_fields

from .. import console
from ..formatting import OUTPUT_JSON, OUTPUT_TABLE, OUTPUT_TEXT, html_link, issue_table, text
from .common import call, check_output, fail, open_client, print_listing, query_params, repo_target

app = typer.Typer(help="Issue operations.", no_args_is_help=True)

KIND_HELP = "Issue kind (bug|enhancement|proposal|task)."
PRIORITY_HELP = "Issue priority (trivial|minor|major|critical|blocker)."


def _print_issue(verb: str, issue: dict[str, Any], output: str) -> None:
    if output == OUTPUT_JSON:
        console.print_json(issue)
        return
    console.plain(f"{verb} issue #{text(issue.get('id'))} ({text(issue.get('state'))}): {text(issue.get('title'))}")
    link = html_link(issue)
    if link:
        console.plain(f"URL: {link}")


@app.command("list")
def list_issues(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        output: str = typer.Option(OUTPUT_TABLE, "--output", "-o", help="Output format: table|json."),
        all_pages: bool = typer.Option(False, "--all", help="Fetch all pages."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        q: str | None = typer.Option(None, "--q", help="Bitbucket q filter."),
        sort: str | None = typer.Option(None, "--sort", help="Sort expression."),
        fields: str | None = typer.Option(None, "--fields", help="Partial fields selector."),
):
    output = check_output(output, (OUTPUT_TABLE, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    params = query_params(q=q, sort=sort, fields=fields)

    client = open_client(profile)
    values = call(client, lambda c: c.issues(ws, rp, params=params, all_pages=all_pages))
    print_listing(values, output, issue_table)


@app.command("create")
def create_issue(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        title: str = typer.Option("", "--title", help="Issue title."),
        content: str | None = typer.Option(None, "--content", help="Issue content (raw text)."),
        state: str | None = typer.Option(None, "--state", help="Issue state."),
        kind: str | None = typer.Option(None, "--kind", help=KIND_HELP),
        priority: str | None = typer.Option(None, "--priority", help=PRIORITY_HELP),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        output: str = typer.Option(OUTPUT_TEXT, "--output", "-o", help="Output format: text|json."),
):
    output = check_output(output, (OUTPUT_TEXT, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    if not title.strip():
        fail("--title is required")

    body = issue_fields(content=content, state=state, kind=kind, priority=priority)
    body["title"] = title
    client = open_client(profile)
    created = call(client, lambda c: c.create_issue(ws, rp, body))
    _print_issue("Created", created, output)


@app.command("update")
def update_issue(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        issue_id: int = typer.Option(0, "--id", help="Issue id."),
        title: str | None = typer.Option(None, "--title", help="Issue title."),
        content: str | None = typer.Option(None, "--content", help="Issue content (raw text)."),
        state: str | None = typer.Option(None, "--state", help="Issue state."),
        kind: str | None = typer.Option(None, "--kind", help=KIND_HELP),
        priority: str | None = typer.Option(None, "--priority", help=PRIORITY_HELP),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        output: str = typer.Option(OUTPUT_TEXT, "--output", "-o", help="Output format: text|json."),
):
    output = check_output(output, (OUTPUT_TEXT, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    if issue_id <= 0:
        fail("--id is required")
    body = issue_fields(title=title, content=content, state=state, kind=kind, priority=priority)
    if not body:
        fail("at least one field to update is required")

    client = open_client(profile)
    updated = call(client, lambda c: c.update_issue(ws, rp, issue_id, body))
    _print_issue("Updated", updated, output)
