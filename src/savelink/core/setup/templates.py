"""Default ignore and attribute files for the shared store."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

GITIGNORE = """\
# OS and editor clutter
Thumbs.db
desktop.ini
.DS_Store
*.tmp
*.bak
*~
"""

# Save data is opaque binary: never diff, merge or convert line endings
GITATTRIBUTES = """\
* binary
"""

STORE_FILES = {
    ".gitignore": GITIGNORE,
    ".gitattributes": GITATTRIBUTES,
}


def write_store_files(store_dir: Path) -> list[Path]:
    """
    Write the default .gitignore and .gitattributes when they are absent.

    Returns:
        Files that were written (existing files are never touched)
    """
    written: list[Path] = []
    for name, content in STORE_FILES.items():
        path = store_dir / name
        if path.exists():
            continue
        path.write_text(content, encoding="utf-8")
        logger.info("Wrote %s", path)
        written.append(path)
    return written
