"""
Tests for the game launcher.

Processes are never started: a fake Popen and sleep are injected.
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from savelink.core.config.models import LaunchConfig
from savelink.core.errors import ExecutableNotFoundError
from savelink.core.launch import build_command, launch, resolve_executable

PATTERN = r"^th\d+[a-z]?\.exe$"


@pytest.fixture
def game_folder(tmp_path: Path) -> Path:
    folder = tmp_path / "th07"
    folder.mkdir()
    (folder / "th07.exe").write_bytes(b"MZ")
    return folder


def fake_popen(exit_code: int = 0) -> Mock:
    process = Mock()
    process.wait.return_value = exit_code
    return Mock(return_value=process)


class TestResolveExecutable:
    def test_game_executable(self, game_folder: Path) -> None:
        assert resolve_executable(game_folder, PATTERN, ["vpatch.exe"]) == (
            game_folder / "th07.exe",
            False,
        )

    def test_patch_launcher_preferred(self, game_folder: Path) -> None:
        (game_folder / "vpatch.exe").write_bytes(b"MZ")

        assert resolve_executable(game_folder, PATTERN, ["vpatch.exe"]) == (
            game_folder / "vpatch.exe",
            True,
        )

    def test_nothing_to_launch(self, tmp_path: Path) -> None:
        assert resolve_executable(tmp_path, PATTERN, ["vpatch.exe"]) is None


class TestBuildCommand:
    def test_with_runner(self) -> None:
        assert build_command(Path("/g/th07.exe"), ["wine"]) == ["wine", "/g/th07.exe"]

    def test_without_runner(self) -> None:
        assert build_command(Path("/g/th07.exe")) == ["/g/th07.exe"]


class TestLaunch:
    """Tests for the blocking launch."""

    def test_waits_then_settles(self, game_folder: Path) -> None:
        popen = fake_popen(exit_code=0)
        sleep = Mock()
        config = LaunchConfig(runner=[])

        report = launch(game_folder, config, popen=popen, sleep=sleep)

        popen.assert_called_once_with([str(game_folder / "th07.exe")], cwd=str(game_folder))
        popen.return_value.wait.assert_called_once()
        sleep.assert_called_once_with(2.0)
        assert report.exit_code == 0
        assert report.settle_delay == 2.0
        assert not report.patched

    def test_runner_prefix_and_patch_launcher(self, game_folder: Path) -> None:
        (game_folder / "vpatch.exe").write_bytes(b"MZ")
        popen = fake_popen(exit_code=3)
        config = LaunchConfig(runner=["wine"])

        report = launch(game_folder, config, popen=popen, sleep=Mock())

        assert report.command == ("wine", str(game_folder / "vpatch.exe"))
        assert report.patched
        assert report.exit_code == 3

    def test_zero_settle_delay(self, game_folder: Path) -> None:
        sleep = Mock()

        launch(game_folder, LaunchConfig(runner=[], settle_delay_seconds=0), popen=fake_popen(),
               sleep=sleep)

        sleep.assert_not_called()

    def test_missing_executable(self, tmp_path: Path) -> None:
        popen = fake_popen()

        with pytest.raises(ExecutableNotFoundError) as exc_info:
            launch(tmp_path, LaunchConfig(), popen=popen, sleep=Mock())

        popen.assert_not_called()
        assert exc_info.value.context["folder"] == str(tmp_path)
