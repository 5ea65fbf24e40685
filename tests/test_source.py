"""Tests for hunkreview.lib.source."""

from pathlib import Path
from unittest.mock import patch

from hunkreview.lib.config import ReviewConfig
from hunkreview.lib.source import DiffSource, fetch_diff, load_files, resolve_range


class TestResolveRange:
    def test_cli_range_wins(self):
        assert resolve_range("v1..v2", ReviewConfig(default_range="main...HEAD")) == "v1..v2"

    def test_config_default(self):
        assert resolve_range(None, ReviewConfig(default_range="main...HEAD")) == "main...HEAD"

    def test_neither(self):
        assert resolve_range(None, ReviewConfig()) is None


class TestDiffSource:
    def test_describe_local(self):
        assert DiffSource(Path("/repo")).describe() == "/repo (working tree vs HEAD)"

    def test_describe_remote(self):
        source = DiffSource(Path("/repo"), "v1..v2", remote="box:/srv/app")
        assert source.describe() == "box:/srv/app (v1..v2)"


class TestFetchDiff:
    """Local vs remote dispatch with configured timeouts."""

    @patch("hunkreview.lib.source.get_diff_text")
    def test_local(self, mock_diff):
        mock_diff.return_value = "text"
        config = ReviewConfig(git_timeout=9)
        assert fetch_diff(DiffSource(Path("/repo"), "v1..v2"), config) == "text"
        mock_diff.assert_called_once_with(Path("/repo"), "v1..v2", timeout=9)

    @patch("hunkreview.lib.source.get_remote_diff_text")
    def test_remote(self, mock_diff):
        mock_diff.return_value = "text"
        config = ReviewConfig(remote_timeout=45, ssh_command="ssh -p 2222")
        fetch_diff(DiffSource(Path("/repo"), None, remote="box:/srv/app"), config)
        mock_diff.assert_called_once_with("box:/srv/app", None, timeout=45, ssh_command="ssh -p 2222")

    @patch("hunkreview.lib.source.get_diff_text")
    def test_load_files_parses(self, mock_diff):
        mock_diff.return_value = "--- a/x\n+++ b/x\n@@ -1 +1 @@\n-a\n+b\n"
        files = load_files(DiffSource(Path("/repo")), ReviewConfig())
        assert [f.path for f in files] == ["x"]
        assert len(files[0].hunks) == 1

    @patch("hunkreview.lib.source.get_diff_text")
    def test_empty_diff(self, mock_diff):
        mock_diff.return_value = ""
        assert load_files(DiffSource(Path("/repo")), ReviewConfig()) == []
