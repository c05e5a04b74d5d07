from __future__ import annotations

import typer

from .. import console
from ..formatting import OUTPUT_JSON, OUTPUT_TABLE, OUTPUT_TEXT, dig, pipeline_state_label, pipeline_table, text
from .common import call, check_output, fail, open_client, print_listing, query_params, repo_target

app = typer.Typer(help="Pipeline operations.", no_args_is_help=True)


@app.command("list")
def list_pipelines(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        output: str = typer.Option(OUTPUT_TABLE, "--output", "-o", help="Output format: table|json."),
        all_pages: bool = typer.Option(False, "--all", help="Fetch all pages."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        sort: str | None = typer.Option(None, "--sort", help="Sort expression."),
        fields: str | None = typer.Option(None, "--fields", help="Partial fields selector."),
):
    output = check_output(output, (OUTPUT_TABLE, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    params = query_params(sort=sort, fields=fields)

    client = open_client(profile)
    values = call(client, lambda c: c.pipelines(ws, rp, params=params, all_pages=all_pages))
    print_listing(values, output, pipeline_table)


@app.command("run")
def run_pipeline(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        branch: str = typer.Option("", "--branch", help="Target branch name."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        output: str = typer.Option(OUTPUT_TEXT, "--output", "-o", help="Output format: text|json."),
):
    output = check_output(output, (OUTPUT_TEXT, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    if not branch.strip():
        fail("--branch is required")

    client = open_client(profile)
    triggered = call(client, lambda c: c.trigger_pipeline(ws, rp, branch=branch))

    if output == OUTPUT_JSON:
        console.print_json(triggered)
        return
    console.plain(f"Triggered pipeline {text(triggered.get('uuid'))}")
    console.plain(f"State: {pipeline_state_label(triggered)}")
    ref = text(dig(triggered, "target", "ref_name")).strip()
    if ref:
        console.plain(f"Ref: {ref}")
