"""
Tests for history_view.py - Rotation history adapter
"""

from history_view import ShiftHistory


class TestShiftHistory:
    """Tests for ShiftHistory counts."""

    def test_missing_entries_count_zero(self):
        history = ShiftHistory()
        assert history.count("W1", "s") == 0
        assert history.total("W1") == 0

    def test_increment_and_totals(self):
        history = ShiftHistory()
        history.increment("W1", "s")
        history.increment("W1", "s")
        history.increment("W1", "t")
        assert history.count("W1", "s") == 2
        assert history.total("W1") == 3

    def test_copy_is_independent(self):
        history = ShiftHistory({"W1": {"s": 1}})
        clone = history.copy()
        clone.increment("W1", "s")
        assert history.count("W1", "s") == 1
        assert clone.count("W1", "s") == 2

    def test_from_mapping_drops_malformed(self):
        history = ShiftHistory.from_mapping({"W1": {"s": "2", "t": "x"}, "W2": [1, 2]})
        assert history.count("W1", "s") == 2
        assert history.count("W1", "t") == 0
        assert "W2" not in history.history

    def test_ensure_workers(self):
        history = ShiftHistory({"W1": {"s": 1}})
        history.ensure_workers(["W1", "W2"])
        assert history.history == {"W1": {"s": 1}, "W2": {}}
