"""
Per-game sync target documents.

A target document is JSON naming the paths to track for one game, either a
bare list or ``{"targets": [...]}``::

    ["/replay", "scoreth07.dat", "th07.cfg"]

Documents are read from the local cache first (<state>/targets/<game>.json,
manually editable) and otherwise fetched once from the configured URL
template and cached.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from savelink.core.errors import ConfigFetchError
from savelink.core.games.models import SyncTarget

logger = logging.getLogger(__name__)


def parse_targets(document: Any) -> list[SyncTarget]:
    """
    Parse a decoded target document.

    Invalid entries are skipped with a warning; duplicates are dropped.

    Raises:
        ValueError: If the document shape is not a list or {"targets": list}
    """
    if isinstance(document, dict):
        document = document.get("targets")
    if not isinstance(document, list):
        raise ValueError("sync target document must be a list of paths")

    targets: list[SyncTarget] = []
    seen: set[str] = set()
    for entry in document:
        if not isinstance(entry, str):
            logger.warning("Skipping non-string sync target %r", entry)
            continue
        try:
            target = SyncTarget.parse(entry)
        except ValueError as e:
            logger.warning("Skipping sync target: %s", e)
            continue
        if target.relative_path in seen:
            continue
        seen.add(target.relative_path)
        targets.append(target)
    return targets


def cache_path(cache_dir: Path, game_id: str) -> Path:
    return cache_dir / f"{game_id}.json"


def read_cached_targets(cache_dir: Path, game_id: str) -> list[SyncTarget] | None:
    """Targets from the local cache, or None when missing or unreadable."""
    path = cache_path(cache_dir, game_id)
    if not path.is_file():
        return None
    try:
        return parse_targets(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValueError) as e:
        logger.warning("Ignoring unreadable sync targets at %s: %s", path, e)
        return None


def fetch_targets(url_template: str, game_id: str, timeout: float = 10.0) -> Any:
    """
    Download the target document for ``game_id``.

    Raises:
        ConfigFetchError: On any network, HTTP or JSON error
    """
    url = url_template.format(game_id=game_id)
    logger.info("Fetching sync targets for %s from %s", game_id, url)
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise ConfigFetchError(
            f"Could not fetch sync targets for {game_id}: {e}", game_id=game_id, url=url
        ) from e


def load_targets(
    game_id: str,
    cache_dir: Path,
    url_template: str | None = None,
    timeout: float = 10.0,
) -> list[SyncTarget]:
    """
    Load the sync targets for a game, fetching and caching them if needed.

    Args:
        game_id: Game identifier, e.g. "th07"
        cache_dir: Directory of cached target documents
        url_template: URL with a {game_id} placeholder, or None for cache only
        timeout: Fetch timeout in seconds

    Returns:
        Non-empty list of sync targets

    Raises:
        ConfigFetchError: If neither the cache nor the network yields targets
    """
    cached = read_cached_targets(cache_dir, game_id)
    if cached:
        return cached

    if not url_template:
        raise ConfigFetchError(
            f"No sync targets for {game_id}: create {cache_path(cache_dir, game_id)} "
            "or configure setup.targets_url",
            game_id=game_id,
        )

    document = fetch_targets(url_template, game_id, timeout=timeout)
    try:
        targets = parse_targets(document)
    except ValueError as e:
        raise ConfigFetchError(f"Invalid sync targets for {game_id}: {e}", game_id=game_id) from e
    if not targets:
        raise ConfigFetchError(f"Sync target document for {game_id} is empty", game_id=game_id)

    path = cache_path(cache_dir, game_id)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    logger.info("Cached sync targets for %s at %s", game_id, path)
    return targets
