"""
Tests for game discovery and sync target documents.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import Mock, patch

import httpx
import pytest

from savelink.core.errors import ConfigFetchError
from savelink.core.games import (
    SyncTarget,
    TargetKind,
    discover_games,
    find_game_executable,
    inspect_folder,
    load_targets,
    parse_targets,
)
from savelink.core.games.targets import read_cached_targets

PATTERN = r"^th\d+[a-z]?\.exe$"
URL = "https://example.org/targets/{game_id}.json"


class TestSyncTarget:
    """Tests for parsing target entries."""

    def test_directory_entry(self) -> None:
        target = SyncTarget.parse("/replay")
        assert target == SyncTarget("replay", TargetKind.DIRECTORY)

    def test_file_entry(self) -> None:
        assert SyncTarget.parse("scoreth07.dat").kind == TargetKind.FILE

    def test_backslashes_normalized(self) -> None:
        assert SyncTarget.parse("\\replay\\extra").relative_path == "replay/extra"

    @pytest.mark.parametrize("entry", ["", "/", "  ", "../escape", "replay/../../x", "C:/saves"])
    def test_rejects_invalid_entries(self, entry: str) -> None:
        with pytest.raises(ValueError):
            SyncTarget.parse(entry)

    def test_locations(self, tmp_path: Path) -> None:
        target = SyncTarget.parse("/replay/extra")

        assert target.source_in(tmp_path / "th07") == tmp_path / "th07" / "replay" / "extra"
        assert target.tracked_in(tmp_path / "saves", "th07") == (
            tmp_path / "saves" / "th07" / "replay" / "extra"
        )


class TestParseTargets:
    def test_list_document(self) -> None:
        targets = parse_targets(["/replay", "th07.cfg"])
        assert [t.relative_path for t in targets] == ["replay", "th07.cfg"]

    def test_object_document(self) -> None:
        assert len(parse_targets({"targets": ["/replay"]})) == 1

    def test_skips_invalid_and_duplicate_entries(self) -> None:
        targets = parse_targets(["/replay", 42, "../x", "replay", "score.dat"])
        assert [t.relative_path for t in targets] == ["replay", "score.dat"]

    def test_rejects_wrong_shape(self) -> None:
        with pytest.raises(ValueError):
            parse_targets({"files": []})


class TestLoadTargets:
    """Tests for cache-first loading and fetching."""

    def test_cache_hit_never_fetches(self, tmp_path: Path) -> None:
        (tmp_path / "th07.json").write_text(json.dumps(["/replay"]))

        with patch("savelink.core.games.targets.httpx.get") as get:
            targets = load_targets("th07", tmp_path, URL)

        get.assert_not_called()
        assert targets == [SyncTarget("replay", TargetKind.DIRECTORY)]

    def test_fetch_and_cache(self, tmp_path: Path) -> None:
        response = Mock()
        response.json.return_value = ["/replay", "scoreth08.dat"]
        cache = tmp_path / "targets"

        with patch("savelink.core.games.targets.httpx.get", return_value=response) as get:
            targets = load_targets("th08", cache, URL, timeout=3.0)

        get.assert_called_once_with(
            "https://example.org/targets/th08.json", timeout=3.0, follow_redirects=True
        )
        assert len(targets) == 2
        assert json.loads((cache / "th08.json").read_text()) == ["/replay", "scoreth08.dat"]
        assert read_cached_targets(cache, "th08") == targets

    def test_network_error(self, tmp_path: Path) -> None:
        with patch(
            "savelink.core.games.targets.httpx.get", side_effect=httpx.ConnectError("offline")
        ):
            with pytest.raises(ConfigFetchError) as exc_info:
                load_targets("th08", tmp_path, URL)

        assert exc_info.value.context["game_id"] == "th08"
        assert not (tmp_path / "th08.json").exists()

    def test_http_error_status(self, tmp_path: Path) -> None:
        request = httpx.Request("GET", "https://example.org/targets/th08.json")
        response = httpx.Response(404, request=request)

        with patch("savelink.core.games.targets.httpx.get", return_value=response):
            with pytest.raises(ConfigFetchError):
                load_targets("th08", tmp_path, URL)

    def test_no_cache_and_no_url(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigFetchError) as exc_info:
            load_targets("th07", tmp_path)

        assert "th07.json" in str(exc_info.value)

    def test_empty_document(self, tmp_path: Path) -> None:
        response = Mock()
        response.json.return_value = []

        with patch("savelink.core.games.targets.httpx.get", return_value=response):
            with pytest.raises(ConfigFetchError):
                load_targets("th08", tmp_path, URL)

    def test_unreadable_cache_refetches(self, tmp_path: Path) -> None:
        (tmp_path / "th08.json").write_text("{broken")
        response = Mock()
        response.json.return_value = ["/replay"]

        with patch("savelink.core.games.targets.httpx.get", return_value=response):
            assert load_targets("th08", tmp_path, URL)


class TestDiscovery:
    """Tests for scanning the launcher root."""

    def test_find_game_executable_case_insensitive(self, tmp_path: Path) -> None:
        (tmp_path / "TH07.EXE").write_bytes(b"MZ")
        (tmp_path / "custom.exe").write_bytes(b"MZ")

        assert find_game_executable(tmp_path, PATTERN) == tmp_path / "TH07.EXE"

    def test_inspect_folder(self, tmp_path: Path) -> None:
        folder = tmp_path / "Perfect Cherry Blossom"
        folder.mkdir()
        (folder / "TH07.exe").write_bytes(b"MZ")

        game = inspect_folder(folder, PATTERN)

        assert game.game_id == "th07"
        assert game.display_name == "Perfect Cherry Blossom"

    def test_folder_without_executable(self, tmp_path: Path) -> None:
        assert inspect_folder(tmp_path, PATTERN) is None

    def test_discover_games(self, tmp_path: Path) -> None:
        for name, exe in [("th08", "th08.exe"), ("th06", "th06.exe"), ("tools", "readme.txt")]:
            (tmp_path / name).mkdir()
            (tmp_path / name / exe).write_bytes(b"")
        (tmp_path / ".hidden").mkdir()
        (tmp_path / ".hidden" / "th09.exe").write_bytes(b"")
        (tmp_path / "saves").mkdir()
        (tmp_path / "saves" / "th10.exe").write_bytes(b"")

        games = discover_games(tmp_path, PATTERN, skip={"saves"})

        assert [g.game_id for g in games] == ["th06", "th08"]
