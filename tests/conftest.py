"""
Pytest configuration and shared fixtures.

Provides an isolated environment (HOME, XDG dirs, git identity), real git
repositories for adapter and end-to-end sync tests, a scripted fake git
adapter for orchestrator tests, and a sample launcher root with a game.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from savelink.core.context import RunContext
from savelink.core.git.models import GitResult, StatusEntry

# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    Keep every test away from the real home directory and git config.

    Points HOME and the XDG directories into tmp_path, gives git a fixed
    identity and clears SAVELINK_* overrides.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.setenv("XDG_DESKTOP_DIR", str(home / "Desktop"))

    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")

    for name in (
        "SAVELINK_REMOTE_URL",
        "SAVELINK_BRANCH",
        "SAVELINK_OFFLINE",
        "SAVELINK_TARGETS_URL",
        "SAVELINK_SETTLE_DELAY",
    ):
        monkeypatch.delenv(name, raising=False)

    return home


# ==============================================================================
# Git Fixtures
# ==============================================================================


def git(cwd: Path, *args: str) -> str:
    """Run a git command for test setup and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def run_git():
    """Provide the git helper used for test setup."""
    return git


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository on branch main."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init")
    git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    return repo


@pytest.fixture
def bare_remote(tmp_path: Path) -> Path:
    """Create a bare repository acting as the sync remote."""
    remote = tmp_path / "remote.git"
    remote.mkdir()
    git(remote, "init", "--bare")
    git(remote, "symbolic-ref", "HEAD", "refs/heads/main")
    return remote


# ==============================================================================
# Fake Git Adapter
# ==============================================================================


class FakeGit:
    """
    Scripted stand-in for GitAdapter.

    Records the name of every call in ``calls``. Results are driven by the
    constructor arguments; ``add_results`` is consumed one value per add().
    History queries (head, changed_files) are answered from ``changed`` and
    are not recorded.
    """

    def __init__(
        self,
        *,
        pull_ok: bool = True,
        status: list[StatusEntry] | None = None,
        add_results: list[bool] | None = None,
        staged: list[str] | None = None,
        commit_ok: bool = True,
        push_ok: bool = True,
        fetch_ok: bool = True,
        reset_ok: bool = True,
        checkout_ok: bool = True,
        changed: list[str] | None = None,
    ) -> None:
        self.pull_ok = pull_ok
        self.status_entries = status or []
        self.add_results = list(add_results or [])
        self.staged = staged if staged is not None else ["score.dat"]
        self.commit_ok = commit_ok
        self.push_ok = push_ok
        self.fetch_ok = fetch_ok
        self.reset_ok = reset_ok
        self.checkout_ok = checkout_ok
        self.changed = list(changed or [])

        self.calls: list[str] = []
        self.commit_messages: list[str] = []
        self.reset_refs: list[str] = []
        self.checkout_paths: list[list[str]] = []

    @staticmethod
    def remote_ref(remote: str, branch: str) -> str:
        return f"{remote}/{branch}"

    def _result(self, name: str, ok: bool, *args: str) -> GitResult:
        self.calls.append(name)
        return GitResult((name, *args), 0 if ok else 1, "" if ok else f"{name} failed")

    def pull(self, remote: str, branch: str) -> GitResult:
        return self._result("pull", self.pull_ok, remote, branch)

    def status(self) -> list[StatusEntry]:
        self.calls.append("status")
        return list(self.status_entries)

    def add(self, paths=None) -> GitResult:
        ok = self.add_results.pop(0) if self.add_results else True
        return self._result("add", ok)

    def diff_cached_names(self) -> list[str]:
        self.calls.append("diff_cached")
        return list(self.staged)

    def commit(self, message: str) -> GitResult:
        self.commit_messages.append(message)
        return self._result("commit", self.commit_ok)

    def push(self, remote: str, branch: str) -> GitResult:
        return self._result("push", self.push_ok, remote, branch)

    def fetch(self, remote: str) -> GitResult:
        return self._result("fetch", self.fetch_ok, remote)

    def reset_hard(self, ref: str) -> GitResult:
        self.reset_refs.append(ref)
        return self._result("reset_hard", self.reset_ok, ref)

    def checkout_ours(self, paths) -> GitResult:
        self.checkout_paths.append(list(paths))
        return self._result("checkout_ours", self.checkout_ok)

    def head(self) -> str | None:
        return "after" if "pull" in self.calls else "before"

    def changed_files(self, old, new="HEAD") -> list[str]:
        return list(self.changed) if old != new else []


@pytest.fixture
def fake_git() -> type[FakeGit]:
    """Provide the FakeGit class for building scripted adapters."""
    return FakeGit


# ==============================================================================
# Launcher Root Fixtures
# ==============================================================================


@pytest.fixture
def launcher_root(tmp_path: Path) -> Path:
    """
    Provide a launcher root holding one game.

    Creates:
    - th07/th07.exe
    - th07/replay/ with three replay files
    - th07/scoreth07.dat
    - .savelink/targets/th07.json naming the replay directory
    """
    root = tmp_path / "games"
    game = root / "th07"
    replay = game / "replay"
    replay.mkdir(parents=True)

    (game / "th07.exe").write_bytes(b"MZ")
    (game / "scoreth07.dat").write_bytes(b"score")
    for i in range(1, 4):
        (replay / f"th7_0{i}.rpy").write_bytes(f"replay {i}".encode())

    targets = root / ".savelink" / "targets"
    targets.mkdir(parents=True)
    (targets / "th07.json").write_text(json.dumps(["/replay"]))

    return root


@pytest.fixture
def run_context(tmp_path: Path) -> RunContext:
    """Provide a RunContext with an existing (non-git) store directory."""
    root = tmp_path / "root"
    root.mkdir()
    ctx = RunContext(root)
    ctx.store_dir.mkdir()
    return ctx
