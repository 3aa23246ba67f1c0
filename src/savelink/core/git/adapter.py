"""
Git adapter for the shared store.

A thin, blocking wrapper over the git executable. Exit code and captured
output are the only observable result: no exception crosses this boundary
and callers inspect ``GitResult.ok``.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from savelink.core.git.models import (
    EXIT_NOT_FOUND,
    EXIT_OS_ERROR,
    EXIT_TIMEOUT,
    GitResult,
    StatusEntry,
    parse_porcelain_status,
)

logger = logging.getLogger(__name__)


class GitAdapter:
    """
    Runs git commands inside one repository.

    Example:
        >>> git = GitAdapter(Path("saves"))
        >>> result = git.pull("origin", "main")
        >>> if not result.ok:
        ...     print(result.output)
    """

    DEFAULT_TIMEOUT = 120.0

    def __init__(
        self,
        repo_dir: Path,
        executable: str = "git",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            repo_dir: Working tree of the repository
            executable: Name or path of the git executable
            timeout: Timeout in seconds for each command
        """
        self.repo_dir = Path(repo_dir)
        self.executable = executable
        self.timeout = timeout

    def run(self, args: Sequence[str], *, merge_stderr: bool = True) -> GitResult:
        """
        Run a git command and capture its result.

        Args:
            args: Git command arguments (without the executable)
            merge_stderr: Interleave stderr into the output. Commands whose
                stdout is parsed pass False; their output is then stdout on
                success and stderr on failure.

        Returns:
            GitResult with exit code and captured output
        """
        argv = tuple(str(a) for a in args)
        cmd = [self.executable, *argv]
        logger.debug("Running git command: %s", " ".join(cmd))

        try:
            proc = subprocess.run(
                cmd,
                cwd=self.repo_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return GitResult(argv, EXIT_TIMEOUT, f"git command timed out after {self.timeout}s")
        except FileNotFoundError:
            return GitResult(argv, EXIT_NOT_FOUND, f"{self.executable} not found in PATH")
        except OSError as e:
            return GitResult(argv, EXIT_OS_ERROR, str(e))

        output = proc.stdout or ""
        if not merge_stderr and proc.returncode != 0:
            output = proc.stderr or ""
        result = GitResult(argv, proc.returncode, output)
        if not result.ok:
            logger.debug("git %s exited %d: %s", argv[0] if argv else "", result.exit_code,
                         result.output.strip())
        return result

    # ------------------------------------------------------------------
    # Repository setup
    # ------------------------------------------------------------------

    def is_repository(self) -> bool:
        """Whether repo_dir is itself the top level of a git work tree."""
        if not self.repo_dir.is_dir():
            return False
        result = self.run(["rev-parse", "--show-toplevel"])
        if not result.ok:
            return False
        return Path(result.output.strip()).resolve() == self.repo_dir.resolve()

    def init(self) -> GitResult:
        return self.run(["init"])

    def set_head_branch(self, branch: str) -> GitResult:
        """Point HEAD at ``branch`` (used right after init, before any commit)."""
        return self.run(["symbolic-ref", "HEAD", f"refs/heads/{branch}"])

    def current_branch(self) -> str | None:
        result = self.run(["symbolic-ref", "--short", "HEAD"])
        return result.output.strip() if result.ok else None

    def configure(self, key: str, value: str) -> GitResult:
        return self.run(["config", key, value])

    def get_config(self, key: str) -> str | None:
        result = self.run(["config", "--get", key])
        value = result.output.strip()
        return value if result.ok and value else None

    def has_remote(self, name: str) -> bool:
        result = self.run(["remote"])
        return result.ok and name in result.output.split()

    def add_remote(self, name: str, url: str) -> GitResult:
        return self.run(["remote", "add", name, url])

    @staticmethod
    def remote_ref(remote: str, branch: str) -> str:
        return f"{remote}/{branch}"

    # ------------------------------------------------------------------
    # Sync operations
    # ------------------------------------------------------------------

    def pull(self, remote: str, branch: str) -> GitResult:
        return self.run(["pull", "--no-rebase", "--no-edit", remote, branch])

    def status(self) -> list[StatusEntry]:
        """
        Working tree status as typed entries.

        Returns:
            One entry per changed, untracked or unmerged path; empty when the
            tree is clean or the status call failed (the failure is logged).
        """
        result = self.run(["status", "--porcelain=v1", "-z", "--untracked-files=all"],
                          merge_stderr=False)
        if not result.ok:
            logger.warning("git status failed: %s", result.output.strip())
            return []
        return parse_porcelain_status(result.output)

    def add(self, paths: Sequence[str] | None = None) -> GitResult:
        """Stage ``paths``, or everything (including deletions) when None."""
        if paths is None:
            return self.run(["add", "-A"])
        return self.run(["add", "--", *paths])

    def diff_cached_names(self) -> list[str]:
        return self._names(["diff", "--cached", "--name-only", "-z"])

    def commit(self, message: str) -> GitResult:
        return self.run(["commit", "-m", message])

    def push(self, remote: str, branch: str) -> GitResult:
        # --set-upstream creates the remote branch on the first push
        return self.run(["push", "--set-upstream", remote, branch])

    def fetch(self, remote: str) -> GitResult:
        return self.run(["fetch", remote])

    def reset_hard(self, ref: str) -> GitResult:
        return self.run(["reset", "--hard", ref])

    def checkout_ours(self, paths: Sequence[str]) -> GitResult:
        return self.run(["checkout", "--ours", "--", *paths])

    # ------------------------------------------------------------------
    # History queries
    # ------------------------------------------------------------------

    def head(self) -> str | None:
        """Commit id of HEAD, or None before the first commit."""
        result = self.run(["rev-parse", "--verify", "--quiet", "HEAD"], merge_stderr=False)
        return result.output.strip() if result.ok and result.output.strip() else None

    def _names(self, args: Sequence[str]) -> list[str]:
        result = self.run(args, merge_stderr=False)
        if not result.ok:
            logger.warning("git %s failed: %s", args[0], result.output.strip())
            return []
        return [name for name in result.output.split("\0") if name]

    def changed_files(self, old: str | None, new: str | None = "HEAD") -> list[str]:
        """
        Paths whose content differs between two commits.

        With ``old`` None (no commit before), every path tracked at ``new``
        counts as changed.
        """
        if new is None:
            return []
        if old is None:
            return self._names(["ls-tree", "-r", "-z", "--name-only", new])
        return self._names(["diff", "--name-only", "-z", old, new])
