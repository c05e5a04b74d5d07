from __future__ import annotations

import os
import sys

import typer

from .. import console
from ..config import DEFAULT_PROFILE, ConfigError, active_profile, load_config, remove_profile, save_config, set_profile
from .common import fail

app = typer.Typer(help="Authenticate and inspect auth status.", no_args_is_help=True)

ENV_TOKEN = "BITBUCKET_TOKEN"
ENV_USERNAME = "BITBUCKET_USERNAME"
NOT_LOGGED_IN = "not logged in: run `bb auth login`"


def _read_token_from_stdin() -> str:
    line = sys.stdin.readline()
    token = line.strip()
    if not token:
        fail("no token provided on stdin")
    return token


def _load():
    try:
        return load_config()
    except ConfigError as e:
        fail(f"load config: {e}")


def _save(cfg) -> str:
    try:
        return save_config(cfg)
    except OSError as e:
        fail(f"save config: {e}")


@app.command("login")
def login(
        profile: str = typer.Option(DEFAULT_PROFILE, "--profile", help="Profile name."),
        token: str | None = typer.Option(None, "--token", help="API token value."),
        with_token: bool = typer.Option(False, "--with-token", help="Read the API token from stdin."),
        username: str | None = typer.Option(
            None,
            "--username",
            envvar=ENV_USERNAME,
            help="Bitbucket username/email for Basic auth.",
        ),
        base_url: str | None = typer.Option(None, "--base-url", help="Bitbucket API base URL."),
):
    resolved_token = (token or "").strip()
    if not resolved_token and with_token:
        resolved_token = _read_token_from_stdin()
    if not resolved_token:
        resolved_token = os.getenv(ENV_TOKEN, "").strip()
    if not resolved_token:
        fail(f"token is required: use --token <value>, --with-token, or {ENV_TOKEN}")
    resolved_username = (username or "").strip()

    cfg = _load()
    name = set_profile(cfg, profile, resolved_token, base_url, resolved_username)
    _save(cfg)

    console.plain(f'authenticated profile "{name}"')
    if resolved_username:
        console.plain(f"auth mode: basic ({resolved_username})")
    else:
        console.plain("auth mode: bearer token")


@app.command("status")
def status(
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
):
    cfg = _load()
    try:
        p, name = active_profile(cfg, profile)
    except ConfigError:
        fail(NOT_LOGGED_IN)

    console.plain(f"Profile: {name}")
    console.plain(f"Base URL: {p.base_url}")
    if p.auth_mode == "basic":
        console.plain(f"Auth: basic ({p.username})")
    else:
        console.plain("Auth: bearer token")
    console.plain("Token: configured" if p.token.strip() else "Token: not configured")


@app.command("logout")
def logout(
        profile: str | None = typer.Option(None, "--profile", help="Profile name override."),
):
    cfg = _load()
    target = (profile or "").strip()
    if not target and not cfg.current.strip():
        fail(NOT_LOGGED_IN)

    removed, ok = remove_profile(cfg, target)
    if not ok:
        if not removed:
            fail(NOT_LOGGED_IN)
        fail(f'profile "{removed}" not found')

    _save(cfg)
    console.plain(f'logged out profile "{removed}"')
    if cfg.current:
        console.plain(f'active profile: "{cfg.current}"')
