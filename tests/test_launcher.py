"""Tests for launching the editor process."""

from __future__ import annotations

import logging
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from vimcode.launcher import LaunchError, editor_command, launch, request_foreground
from vimcode.preferences import PathMode, Preferences

ASSETS = "/work/Game/Assets"


class TestEditorCommand:
    """Tests for editor_command function."""

    def test_posix_splits_arguments(self) -> None:
        """Arguments become separate argv entries."""
        command = editor_command("/usr/bin/gvim", '--servername Unity +"call cursor(1,0)" "a b.cs"', "linux")
        assert command == ["/usr/bin/gvim", "--servername", "Unity", "+call cursor(1,0)", "a b.cs"]

    def test_windows_single_command_line(self) -> None:
        """Windows gets the quoted executable followed by the raw arguments."""
        command = editor_command(r"C:\Vim\gvim.bat", '--servername Unity "C:\\Game\\Foo.cs"', "win32")
        assert command == '"C:\\Vim\\gvim.bat" --servername Unity "C:\\Game\\Foo.cs"'

    def test_unbalanced_quotes_raise(self) -> None:
        """Broken quoting in extra commands is a ValueError."""
        with pytest.raises(ValueError, match="quotation"):
            editor_command("/usr/bin/gvim", '+"unterminated', "linux")


@patch("vimcode.launcher.sys.platform", "linux")
class TestLaunch:
    """Tests for launch function."""

    def test_starts_detached_without_waiting(self) -> None:
        """The editor is started and not waited on."""
        prefs = Preferences(editor_path="/usr/bin/gvim")
        with patch("vimcode.launcher.subprocess.Popen") as mock_popen:
            process = launch("Assets/Foo.cs", 10, 3, prefs, assets_dir=ASSETS)

        assert process is mock_popen.return_value
        command = mock_popen.call_args.args[0]
        assert command == [
            "/usr/bin/gvim",
            "--servername",
            "Unity",
            "--remote-silent",
            "+call cursor(10,3)",
            "+set path+=/work/Game/Assets/**",
            "Assets/Foo.cs",
        ]
        assert mock_popen.call_args.kwargs["start_new_session"] is True
        process.wait.assert_not_called()

    def test_wait_blocks_until_exit(self) -> None:
        """The legacy mode waits for the process."""
        with patch("vimcode.launcher.subprocess.Popen") as mock_popen:
            launch("a.cs", 1, 1, Preferences(), assets_dir=ASSETS, wait=True)
        mock_popen.return_value.wait.assert_called_once_with()

    def test_extra_commands_reach_vim(self) -> None:
        """Extra commands are passed before the file."""
        prefs = Preferences(path_mode=PathMode.NONE, extra_commands='+"runtime unity.vim"')
        with patch("vimcode.launcher.subprocess.Popen") as mock_popen:
            launch("a.cs", 1, -1, prefs, assets_dir=ASSETS)
        assert mock_popen.call_args.args[0][-2:] == ["+runtime unity.vim", "a.cs"]

    def test_missing_executable_raises_launch_error(self) -> None:
        """OSError from Popen becomes LaunchError."""
        prefs = Preferences(editor_path="/nonexistent/gvim")
        with (
            patch("vimcode.launcher.subprocess.Popen", side_effect=FileNotFoundError("No such file")),
            pytest.raises(LaunchError, match="/nonexistent/gvim") as exc_info,
        ):
            launch("a.cs", 1, 1, prefs, assets_dir=ASSETS)
        assert exc_info.value.editor_path == "/nonexistent/gvim"
        assert "No such file" in exc_info.value.reason

    def test_invalid_extra_commands_raise_launch_error(self) -> None:
        """Unbalanced quotes are reported as a launch failure."""
        prefs = Preferences(extra_commands='+"oops')
        with (
            patch("vimcode.launcher.subprocess.Popen") as mock_popen,
            pytest.raises(LaunchError, match="invalid arguments"),
        ):
            launch("a.cs", 1, 1, prefs, assets_dir=ASSETS)
        mock_popen.assert_not_called()

    def test_no_retry(self) -> None:
        """A failed start is attempted exactly once."""
        with (
            patch("vimcode.launcher.subprocess.Popen", side_effect=PermissionError("denied")) as mock_popen,
            pytest.raises(LaunchError),
        ):
            launch("a.cs", 1, 1, Preferences(), assets_dir=ASSETS)
        assert mock_popen.call_count == 1


@patch("vimcode.launcher.sys.platform", "linux")
class TestRequestForeground:
    """Tests for request_foreground function."""

    def test_runs_helper_synchronously(self) -> None:
        """A clean helper Vim calls remote_foreground and quits."""
        prefs = Preferences(editor_path="/usr/bin/gvim", server_name="Game")
        with patch("vimcode.launcher.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            assert request_foreground(prefs) is True
        mock_run.assert_called_once_with(
            ["/usr/bin/gvim", "--clean", "+call remote_foreground('Game')", "+quit"],
            check=False,
        )

    def test_start_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Failures are logged, not raised."""
        with (
            caplog.at_level(logging.WARNING, logger="vimcode.launcher"),
            patch("vimcode.launcher.subprocess.run", side_effect=OSError("boom")),
        ):
            assert request_foreground(Preferences()) is False
        assert "foreground" in caplog.text

    def test_non_zero_exit(self) -> None:
        """A failing helper reports False."""
        with patch("vimcode.launcher.subprocess.run") as mock_run:
            mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=1)
            assert request_foreground(Preferences()) is False
