"""pytest configuration and fixtures for navcard tests."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


class SequenceIds:
    """ID generator that hands out a fixed script of candidates."""

    def __init__(self, *candidates):
        self._candidates = list(candidates)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self._candidates.pop(0)


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def forest():
    """Empty forest with deterministic numeric IDs."""
    from itertools import count
    from navcard.core import OrderedForest
    from navcard.protocols import NavConfig

    counter = count(1)
    return OrderedForest(
        id_generator=lambda: f"n{next(counter)}",
        config=NavConfig(seed_default_item=False),
    )


@pytest.fixture
def scenario(forest):
    """P1 with children S1 (holding T1) and S2."""
    from navcard.core import NavLevel

    p1 = forest.add_item(NavLevel.PRIMARY, None)
    s1 = forest.add_item(NavLevel.SECONDARY, p1)
    s2 = forest.add_item(NavLevel.SECONDARY, p1)
    t1 = forest.add_item(NavLevel.TERTIARY, s1)
    return forest, {"P1": p1, "S1": s1, "S2": s2, "T1": t1}


def assert_forest_invariants(forest):
    """Order matches the record keys and every block is contiguous."""
    order = forest.ids()
    assert len(order) == len(set(order))
    assert set(order) == set(forest._records.keys())

    for position, item_id in enumerate(order):
        block = forest.get_block(item_id)
        assert block[0] == item_id
        assert order[position:position + len(block)] == block
        assert set(block[1:]) == set(forest.get_all_descendants(item_id))
