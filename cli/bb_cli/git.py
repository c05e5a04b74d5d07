from __future__ import annotations

import subprocess
import urllib.parse


class GitError(Exception):
    """A git subprocess exited non-zero or could not be started."""


def run_git(*args: str, cwd: str | None = None) -> str:
    try:
        res = subprocess.run(
            ["git", *args],
            cwd=cwd or None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except FileNotFoundError as e:
        raise GitError("git command failed: git not found in PATH") from e
    if res.returncode != 0:
        msg = ((res.stdout or "") + (res.stderr or "")).strip()
        if not msg:
            msg = f"exit status {res.returncode}"
        raise GitError(f"git command failed: {msg}")
    return res.stdout


def redact_token(text: str, token: str | None) -> str:
    secret = (token or "").strip()
    if not secret:
        return text
    text = text.replace(secret, "***")
    # remote URLs carry the token percent-encoded
    return text.replace(urllib.parse.quote(secret, safe=""), "***")
