"""
Unit tests for the administration CLI.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from videofiles.cli import main


class TestCli:
    """Tests for argument handling and output."""

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])

    def test_invalid_info_hash(self, capsys):
        assert main(["info-hash-exists", "not-a-hash"]) == 2
        assert "invalid info hash" in capsys.readouterr().err

    def test_info_hash_exists(self, capsys):
        cache = AsyncMock()
        cache.exists.return_value = True

        with patch("videofiles.cli.build_info_hash_cache", return_value=cache):
            assert main(["info-hash-exists", "a" * 40]) == 0

        cache.exists.assert_awaited_once_with("a" * 40)
        assert capsys.readouterr().out.strip() == "true"

    def test_stats(self, capsys):
        stats = {"total_local_video_files_size": 4500}

        with patch("videofiles.cli.get_stats", AsyncMock(return_value=stats)):
            assert main(["stats"]) == 0

        assert json.loads(capsys.readouterr().out) == stats
