from __future__ import annotations

import contextlib
from typing import Iterator

import typer

from .. import console
from ..config import ConfigError, Profile
from ..formatting import OUTPUT_JSON, OUTPUT_TABLE, OUTPUT_TEXT, wiki_table
from ..git import GitError, redact_token
from ..http import profile_from_config
from ..wiki import WikiError, cloned_wiki, list_pages, normalize_page_path, put_page, read_page
from .common import check_output, fail, print_listing, repo_target

app = typer.Typer(help="Wiki operations (git-backed).", no_args_is_help=True)


def _profile(profile: str | None) -> Profile:
    try:
        return profile_from_config(profile)
    except ConfigError as e:
        fail(str(e))


def _page(page: str | None) -> str:
    try:
        return normalize_page_path(page)
    except WikiError as e:
        fail(str(e))


@contextlib.contextmanager
def _wiki_errors(p: Profile) -> Iterator[None]:
    try:
        yield
    except GitError as e:
        fail(redact_token(str(e), p.token))
    except WikiError as e:
        fail(str(e))


@app.command("list")
def list_wiki(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        output: str = typer.Option(OUTPUT_TABLE, "--output", "-o", help="Output format: table|json."),
):
    output = check_output(output, (OUTPUT_TABLE, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    p = _profile(profile)

    with _wiki_errors(p), cloned_wiki(p, ws, rp) as repo_dir:
        pages = list_pages(repo_dir)

    if output == OUTPUT_JSON:
        console.print_json([{"path": page.path, "size": page.size} for page in pages])
        return
    print_listing(pages, output, wiki_table)


@app.command("get")
def get_wiki(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        page: str | None = typer.Option(None, "--page", help="Wiki page path."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        output: str = typer.Option(OUTPUT_TEXT, "--output", "-o", help="Output format: text|json."),
):
    output = check_output(output, (OUTPUT_TEXT, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    clean_page = _page(page)
    p = _profile(profile)

    with _wiki_errors(p), cloned_wiki(p, ws, rp) as repo_dir:
        content = read_page(repo_dir, clean_page)

    if output == OUTPUT_JSON:
        console.print_json({"page": clean_page, "content": content})
        return
    typer.echo(content, nl=False)


@app.command("put")
def put_wiki(
        workspace: str | None = typer.Option(None, "--workspace", "-w", help="Workspace slug."),
        repo: str | None = typer.Option(None, "--repo", "-r", help="Repository slug."),
        page: str | None = typer.Option(None, "--page", help="Wiki page path."),
        content: str | None = typer.Option(None, "--content", help="Wiki page content."),
        file_input: str | None = typer.Option(None, "--file", help="Read wiki page content from file path."),
        message: str | None = typer.Option(None, "--message", "-m", help="Git commit message."),
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
        output: str = typer.Option(OUTPUT_TEXT, "--output", "-o", help="Output format: text|json."),
):
    output = check_output(output, (OUTPUT_TEXT, OUTPUT_JSON))
    ws, rp = repo_target(workspace, repo)
    clean_page = _page(page)
    has_content = bool((content or "").strip())
    has_file = bool((file_input or "").strip())
    if not has_content and not has_file:
        fail("either --content or --file is required")
    if has_content and has_file:
        fail("use only one of --content or --file")

    if has_file:
        try:
            with open(file_input.strip(), encoding="utf-8") as f:
                page_content = f.read()
        except OSError as e:
            fail(f"read --file: {e}")
    else:
        page_content = content
    p = _profile(profile)

    with _wiki_errors(p), cloned_wiki(p, ws, rp) as repo_dir:
        result = put_page(repo_dir, clean_page, page_content, message=message, username=p.username)

    if output == OUTPUT_JSON:
        console.print_json({"page": clean_page, "status": result})
        return
    if result == "no_change":
        console.plain(f"No changes for wiki page: {clean_page}")
    else:
        console.plain(f"Updated wiki page: {clean_page}")
