"""Unit tests for interactive selection."""

from unittest.mock import patch

import pytest

from podlang_cli.selection import choose


class TestChoose:
    """Tests for choose function."""

    def test_single_item_skips_prompt(self):
        with patch("podlang_cli.selection.IntPrompt.ask") as ask:
            assert choose("Choose a pod", ["web"]) == "web"
        ask.assert_not_called()

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            choose("Choose a pod", [])

    def test_returns_numbered_choice(self):
        with patch("podlang_cli.selection.IntPrompt.ask", return_value=2):
            assert choose("Choose a pod", ["web", "worker", "db"]) == "worker"

    def test_reasks_when_out_of_range(self, capsys):
        with patch("podlang_cli.selection.IntPrompt.ask", side_effect=[0, 9, 3]) as ask:
            assert choose("Choose a pod", ["web", "worker", "db"]) == "db"
        assert ask.call_count == 3
        assert "between 1 and 3" in capsys.readouterr().out
