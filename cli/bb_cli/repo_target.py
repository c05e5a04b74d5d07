from __future__ import annotations

import urllib.parse

from . import git

BITBUCKET_HOST = "bitbucket.org"


class TargetError(Exception):
    """Workspace or repository could not be determined."""


def parse_bitbucket_path(raw_path: str) -> tuple[str, str] | None:
    parts = raw_path.strip().strip("/").split("/")
    if len(parts) != 2:
        return None
    workspace = parts[0].strip()
    repo = parts[1].removesuffix(".git").strip()
    if not workspace or not repo:
        return None
    return workspace, repo


def parse_bitbucket_remote(remote: str) -> tuple[str, str] | None:
    """Extract (workspace, repo) from an https or scp-style bitbucket.org remote."""
    value = remote.strip()
    if not value:
        return None

    if "://" in value:
        try:
            parsed = urllib.parse.urlsplit(value)
            host = (parsed.hostname or "").lower()
        except ValueError:
            return None
        if host != BITBUCKET_HOST:
            return None
        return parse_bitbucket_path(parsed.path)

    host, sep, path = value.partition(":")
    if not sep:
        return None
    host = host.rsplit("@", 1)[-1].strip().lower()
    if host != BITBUCKET_HOST:
        return None
    return parse_bitbucket_path(path)


def infer_from_git(cwd: str | None = None) -> tuple[str, str] | None:
    try:
        remote = git.run_git("config", "--get", "remote.origin.url", cwd=cwd)
    except git.GitError:
        return None
    return parse_bitbucket_remote(remote)


def resolve_repo_target(workspace: str | None, repo: str | None, *, require_repo: bool = True) -> tuple[str, str]:
    ws = (workspace or "").strip()
    rp = (repo or "").strip()
    if not ws or (require_repo and not rp):
        inferred = infer_from_git()
        if inferred:
            ws = ws or inferred[0]
            rp = rp or inferred[1]
    if not ws:
        raise TargetError("--workspace is required")
    if require_repo and not rp:
        raise TargetError("--repo is required")
    return ws, rp
