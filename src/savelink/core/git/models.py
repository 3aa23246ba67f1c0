"""
Typed results returned by the git adapter.
"""

from __future__ import annotations

from dataclasses import dataclass

# Porcelain v1 XY codes for unmerged paths (git-status(1), "Short Format")
UNMERGED_CODES = frozenset({"DD", "AU", "UD", "UA", "DU", "AA", "UU"})

EXIT_NOT_FOUND = 127
EXIT_TIMEOUT = 124
EXIT_OS_ERROR = 126


@dataclass(frozen=True)
class GitResult:
    """
    Outcome of one git invocation.

    Attributes:
        args: Arguments passed after the executable
        exit_code: Process exit code (127 missing executable, 124 timeout)
        output: Combined stdout and stderr
    """

    args: tuple[str, ...]
    exit_code: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def command(self) -> str:
        return "git " + " ".join(self.args)


@dataclass(frozen=True)
class StatusEntry:
    """
    One path reported by ``git status --porcelain``.

    Attributes:
        path: Path relative to the repository root
        code: Two-letter XY status code ("??" for untracked)
    """

    path: str
    code: str

    @property
    def is_unmerged(self) -> bool:
        return self.code in UNMERGED_CODES

    @property
    def is_untracked(self) -> bool:
        return self.code == "??"


def parse_porcelain_status(raw: str) -> list[StatusEntry]:
    """
    Parse NUL-separated ``git status --porcelain=v1 -z`` output.

    Renames and copies carry their original path as an extra NUL-separated
    field, which is skipped.

    Example:
        >>> parse_porcelain_status("UU score.dat\\0?? replay/th7_01.rpy\\0")
        [StatusEntry(path='score.dat', code='UU'), StatusEntry(path='replay/th7_01.rpy', code='??')]
    """
    entries: list[StatusEntry] = []
    fields = raw.split("\0")
    i = 0
    while i < len(fields):
        item = fields[i]
        i += 1
        if len(item) < 4:
            continue
        code, path = item[:2], item[3:]
        entries.append(StatusEntry(path=path, code=code))
        if code[0] in ("R", "C"):
            i += 1
    return entries


def unmerged_paths(entries: list[StatusEntry]) -> list[str]:
    """Paths of all unmerged entries, in status order."""
    return [entry.path for entry in entries if entry.is_unmerged]
