from __future__ import annotations

import contextlib
import os
import posixpath
import tempfile
import urllib.parse
from dataclasses import dataclass
from typing import Iterator

from . import git
from .config import Profile

DEFAULT_COMMIT_NAME = "bb-cli"
DEFAULT_COMMIT_EMAIL = "bb-cli@local"


class WikiError(Exception):
    """Invalid wiki page reference or missing page."""


@dataclass
class WikiPage:
    path: str
    size: int


def normalize_page_path(page: str | None) -> str:
    value = (page or "").strip()
    if not value:
        raise WikiError("--page is required")
    clean = posixpath.normpath(value)
    if clean in {".", "/", "//"} or clean == ".." or clean.startswith("../"):
        raise WikiError("invalid --page value")
    return clean.lstrip("/")


def wiki_auth_user(username: str | None) -> str:
    user = (username or "").strip()
    if not user:
        # access tokens authenticate git over https as x-token-auth
        return "x-token-auth"
    if "@" in user:
        # api tokens use the account e-mail for REST but not for git
        return "x-bitbucket-api-token-auth"
    return user


def wiki_host(base_url: str) -> str:
    host = "bitbucket.org"
    try:
        parsed = urllib.parse.urlsplit(base_url.strip())
        if parsed.netloc:
            host = parsed.netloc
    except ValueError:
        pass
    if host == "api.bitbucket.org":
        host = "bitbucket.org"
    return host


def build_wiki_remote_url(p: Profile, workspace: str, repo: str) -> str:
    if not p.token.strip():
        raise WikiError("profile has no token configured")
    user = urllib.parse.quote(wiki_auth_user(p.username), safe="")
    token = urllib.parse.quote(p.token, safe="")
    return f"https://{user}:{token}@{wiki_host(p.base_url)}/{workspace}/{repo}.git/wiki"


@contextlib.contextmanager
def cloned_wiki(p: Profile, workspace: str, repo: str) -> Iterator[str]:
    """Shallow-clone the wiki into a temp dir that is removed on exit."""
    remote = build_wiki_remote_url(p, workspace, repo)
    with tempfile.TemporaryDirectory(prefix="bb-wiki-") as tmp_dir:
        git.run_git("clone", "--depth", "1", remote, tmp_dir)
        yield tmp_dir


def list_pages(repo_dir: str) -> list[WikiPage]:
    pages: list[WikiPage] = []
    for root, dirs, files in os.walk(repo_dir):
        dirs[:] = [d for d in dirs if d != ".git"]
        for name in files:
            full = os.path.join(root, name)
            rel = os.path.relpath(full, repo_dir).replace(os.sep, "/")
            pages.append(WikiPage(path=rel, size=os.path.getsize(full)))
    pages.sort(key=lambda page: page.path)
    return pages


def page_file(repo_dir: str, page: str) -> str:
    return os.path.join(repo_dir, *page.split("/"))


def read_page(repo_dir: str, page: str) -> str:
    try:
        with open(page_file(repo_dir, page), encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError as e:
        raise WikiError(f"wiki page not found: {page}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise WikiError(f"read wiki page: {e}") from e


def commit_identity(username: str | None) -> tuple[str, str]:
    user = (username or "").strip()
    if "@" in user:
        return user.split("@", 1)[0], user
    return DEFAULT_COMMIT_NAME, DEFAULT_COMMIT_EMAIL


def put_page(repo_dir: str, page: str, content: str, *, message: str | None, username: str | None) -> str:
    """Write, commit and push one page. Returns "updated" or "no_change"."""
    path = page_file(repo_dir, page)
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
    except OSError as e:
        raise WikiError(f"create wiki page directory: {e}") from e
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise WikiError(f"write wiki page: {e}") from e

    git.run_git("add", "--", page, cwd=repo_dir)
    status = git.run_git("status", "--porcelain", "--", page, cwd=repo_dir)
    if not status.strip():
        return "no_change"

    commit_msg = (message or "").strip() or f"Update wiki page {page}"
    name, email = commit_identity(username)
    git.run_git("config", "user.name", name, cwd=repo_dir)
    git.run_git("config", "user.email", email, cwd=repo_dir)
    git.run_git("commit", "-m", commit_msg, cwd=repo_dir)
    git.run_git("push", "origin", "HEAD", cwd=repo_dir)
    return "updated"
