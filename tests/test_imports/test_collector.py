"""Tests for import warning collection and per-board locks."""

import threading

import pytest

from taskboard.imports.collector import WarningCollector
from taskboard.imports.locks import BoardLockRegistry


class TestWarningCollector:
    """Tests for WarningCollector messages."""

    def test_starts_empty(self):
        """Test a new collector has no warnings."""
        warnings = WarningCollector()
        assert len(warnings) == 0
        assert warnings.to_list() == []

    def test_title_truncated(self):
        """Test the title warning names the list, card and lengths."""
        warnings = WarningCollector()
        warnings.title_truncated("To Do", 2, "x" * 300, 255)
        assert warnings.to_list() == [
            f'List "To Do", Card 2 "{"x" * 50}...": Title truncated from 300 to 255 characters'
        ]

    def test_description_truncated_formats_limit(self):
        """Test the description limit is printed with a thousands separator."""
        warnings = WarningCollector()
        warnings.description_truncated("To Do", 1, "Card", 12000, 10000)
        assert warnings.to_list() == [
            'List "To Do", Card 1 "Card": Description truncated from 12000 to 10,000 characters'
        ]

    def test_duplicate_labels(self):
        """Test the duplicate label warning."""
        warnings = WarningCollector()
        warnings.duplicate_labels("To Do", "Card")
        assert list(warnings) == ['List "To Do", Card "Card": Duplicate labels removed']

    def test_checklist_warnings(self):
        """Test checklist name and item title warnings keep insertion order."""
        warnings = WarningCollector()
        warnings.checklist_name_truncated("L", "C", 1, 300, 255)
        warnings.item_title_truncated("L", "C", 1, 3, 600, 500)
        assert warnings.to_list() == [
            'List "L", Card "C", Checklist 1: Name truncated from 300 to 255 characters',
            'List "L", Card "C", Checklist 1, Item 3: Title truncated from 600 to 500 characters',
        ]

    def test_to_list_is_a_copy(self):
        """Test callers cannot mutate the collector through to_list."""
        warnings = WarningCollector()
        warnings.add("one")
        warnings.to_list().append("two")
        assert len(warnings) == 1


class TestBoardLockRegistry:
    """Tests for per-board import locks."""

    def test_hold_acquires_and_releases(self):
        """Test the lock is held only inside the block."""
        registry = BoardLockRegistry()
        with registry.hold("board-1"):
            assert registry.is_held("board-1")
            assert not registry.is_held("board-2")
        assert not registry.is_held("board-1")

    def test_hold_releases_on_error(self):
        """Test the lock is released when the block raises."""
        registry = BoardLockRegistry()
        with pytest.raises(ValueError):
            with registry.hold("board-1"):
                raise ValueError("boom")
        assert not registry.is_held("board-1")
        assert len(registry) == 0

    def test_idle_locks_are_evicted(self):
        """Test the registry forgets boards nobody is importing into."""
        registry = BoardLockRegistry()
        for i in range(100):
            with registry.hold(f"board-{i}"):
                assert len(registry) == 1
        assert len(registry) == 0

    def test_same_board_is_serialized(self):
        """Test a second import into the same board waits for the first."""
        registry = BoardLockRegistry()
        entered = threading.Event()

        def second_import():
            with registry.hold("board-1"):
                entered.set()

        with registry.hold("board-1"):
            thread = threading.Thread(target=second_import)
            thread.start()
            assert not entered.wait(0.2)
        thread.join(timeout=5)

        assert entered.is_set()
        assert len(registry) == 0

    def test_other_boards_not_blocked(self):
        """Test imports into different boards run concurrently."""
        registry = BoardLockRegistry()
        entered = threading.Event()

        def other_import():
            with registry.hold("board-2"):
                entered.set()

        with registry.hold("board-1"):
            thread = threading.Thread(target=other_import)
            thread.start()
            assert entered.wait(5)
        thread.join(timeout=5)
