import pytest

from bb_cli import git, repo_target
from bb_cli.repo_target import TargetError, parse_bitbucket_remote, resolve_repo_target


def test_parse_https_and_ssh_remotes() -> None:
    assert parse_bitbucket_remote("https://user@bitbucket.org/acme/widgets.git") == ("acme", "widgets")
    assert parse_bitbucket_remote("ssh://git@bitbucket.org/acme/widgets") == ("acme", "widgets")
    assert parse_bitbucket_remote("git@bitbucket.org:acme/widgets.git\n") == ("acme", "widgets")
    assert parse_bitbucket_remote("bitbucket.org:acme/widgets/") == ("acme", "widgets")


def test_parse_rejects_other_hosts_and_shapes() -> None:
    for remote in (
            "",
            "https://github.com/acme/widgets.git",
            "git@github.com:acme/widgets.git",
            "https://bitbucket.org/acme",
            "https://bitbucket.org/acme/widgets/extra",
            "not a remote",
    ):
        assert parse_bitbucket_remote(remote) is None


def test_resolve_uses_git_origin_for_missing_values(monkeypatch) -> None:
    calls = []

    def _fake_git(*args, cwd=None):
        calls.append(args)
        return "git@bitbucket.org:acme/widgets.git\n"

    monkeypatch.setattr(git, "run_git", _fake_git)

    assert resolve_repo_target(None, None) == ("acme", "widgets")
    assert resolve_repo_target("other", None) == ("other", "widgets")
    assert calls[0] == ("config", "--get", "remote.origin.url")


def test_resolve_skips_git_when_flags_given(monkeypatch) -> None:
    monkeypatch.setattr(git, "run_git", lambda *a, **k: pytest.fail("git should not run"))
    assert resolve_repo_target("ws", "repo") == ("ws", "repo")
    assert resolve_repo_target("ws", None, require_repo=False) == ("ws", "")


def test_resolve_reports_missing_flags(monkeypatch) -> None:
    def _no_git(*args, cwd=None):
        raise git.GitError("git command failed: not a git repository")

    monkeypatch.setattr(git, "run_git", _no_git)
    with pytest.raises(TargetError, match="--workspace is required"):
        resolve_repo_target(None, "repo")
    with pytest.raises(TargetError, match="--repo is required"):
        repo_target.resolve_repo_target("ws", "  ")
