"""
Tests for the run context, logging, connectivity probe and backups.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import httpx

from savelink.core.context import RunContext
from savelink.core.logging import setup_logging
from savelink.core.probe import is_online
from savelink.core.sync import create_snapshot


class TestRunContext:
    def test_paths(self, tmp_path: Path) -> None:
        ctx = RunContext(tmp_path, store_name="store")

        assert ctx.store_dir == tmp_path.resolve() / "store"
        assert ctx.state_dir == tmp_path.resolve() / ".savelink"
        assert ctx.log_file.name == "savelink.log"
        assert ctx.targets_dir.parent == ctx.state_dir
        assert ctx.backups_dir.parent == ctx.state_dir

    def test_marker(self, tmp_path: Path) -> None:
        ctx = RunContext(tmp_path)
        assert not ctx.is_setup_complete()

        marker = ctx.write_marker()

        assert ctx.is_setup_complete()
        assert ctx.machine_name in marker.read_text()


class TestLogging:
    def test_file_log_appends(self, tmp_path: Path) -> None:
        log_file = tmp_path / "state" / "savelink.log"

        setup_logging(log_file).info("first run")
        setup_logging(log_file)
        logging.getLogger("savelink.core.sync").warning("second run")

        lines = log_file.read_text().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("INFO - first run")
        assert " - savelink.core.sync - WARNING - second run" in lines[1]

    def test_debug_adds_stderr_handler(self, tmp_path: Path) -> None:
        logger = setup_logging(tmp_path / "savelink.log", debug=True)

        kinds = sorted(type(h).__name__ for h in logger.handlers)
        assert kinds == ["FileHandler", "StreamHandler"]

    def test_no_sink(self) -> None:
        logger = setup_logging()

        assert [type(h) for h in logger.handlers] == [logging.NullHandler]


class TestProbe:
    def test_online(self) -> None:
        with patch("savelink.core.probe.httpx.head") as head:
            assert is_online("https://example.org", timeout=1.0)

        head.assert_called_once_with("https://example.org", timeout=1.0, follow_redirects=False)

    def test_any_response_is_online(self) -> None:
        response = httpx.Response(503, request=httpx.Request("HEAD", "https://example.org"))
        with patch("savelink.core.probe.httpx.head", return_value=response):
            assert is_online("https://example.org")

    def test_connect_error_is_offline(self) -> None:
        with patch("savelink.core.probe.httpx.head", side_effect=httpx.ConnectError("dns")):
            assert not is_online("https://example.org")

    def test_timeout_is_offline(self) -> None:
        with patch("savelink.core.probe.httpx.head", side_effect=httpx.ReadTimeout("slow")):
            assert not is_online("https://example.org")


class TestSnapshot:
    """Tests for backup snapshots."""

    def test_copies_tree_without_git(self, tmp_path: Path) -> None:
        store = tmp_path / "saves"
        (store / ".git").mkdir(parents=True)
        (store / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
        (store / "th07").mkdir()
        (store / "th07" / "scoreth07.dat").write_bytes(b"score")

        snapshot = create_snapshot(store, tmp_path / "backups", now=datetime(2026, 1, 2, 3, 4, 5))

        assert snapshot == tmp_path / "backups" / "20260102-030405"
        assert (snapshot / "th07" / "scoreth07.dat").read_bytes() == b"score"
        assert not (snapshot / ".git").exists()

    def test_same_second_gets_suffix(self, tmp_path: Path) -> None:
        store = tmp_path / "saves"
        store.mkdir()
        now = datetime(2026, 1, 2, 3, 4, 5)

        first = create_snapshot(store, tmp_path / "backups", now=now)
        second = create_snapshot(store, tmp_path / "backups", now=now)

        assert first != second
        assert second.name == "20260102-030405-1"
