"""Tests for the ordered forest engine."""

import pytest

from conftest import SequenceIds, assert_forest_invariants
from navcard.core import NavigationError, NavLevel, OrderedForest
from navcard.protocols import NavConfig


def test_scenario_insertion_order(scenario):
    """Children go after the parent's whole block."""
    forest, ids = scenario
    assert forest.ids() == [ids["P1"], ids["S1"], ids["T1"], ids["S2"]]
    assert_forest_invariants(forest)


def test_scenario_move_down_carries_block(scenario):
    forest, ids = scenario
    assert forest.move_down(ids["S1"])
    assert forest.ids() == [ids["P1"], ids["S2"], ids["S1"], ids["T1"]]
    assert_forest_invariants(forest)


def test_scenario_delete_cascades_and_clears_selection(scenario):
    forest, ids = scenario
    forest.select(ids["T1"])

    assert forest.delete_item(ids["S1"])

    assert forest.ids() == [ids["P1"], ids["S2"]]
    assert forest.get_item(ids["S1"]) is None
    assert forest.get_item(ids["T1"]) is None
    assert forest.selected_id is None
    assert_forest_invariants(forest)


def test_add_root_is_appended_last(scenario):
    forest, ids = scenario
    p2 = forest.add_item(NavLevel.PRIMARY)
    assert forest.ids()[-1] == p2
    assert forest.get_children(None) == [ids["P1"], p2]


def test_add_child_becomes_last_child(scenario):
    forest, ids = scenario
    s3 = forest.add_item(NavLevel.SECONDARY, ids["P1"])
    assert forest.get_children(ids["P1"]) == [ids["S1"], ids["S2"], s3]
    assert forest.ids()[-1] == s3
    assert_forest_invariants(forest)


def test_add_tertiary_into_first_of_several_blocks(scenario):
    forest, ids = scenario
    t2 = forest.add_item("tertiary", ids["S1"])
    assert forest.ids() == [ids["P1"], ids["S1"], ids["T1"], t2, ids["S2"]]
    assert_forest_invariants(forest)


def test_add_selects_new_item(forest):
    new_id = forest.add_item(NavLevel.PRIMARY)
    assert forest.selected_id == new_id


def test_new_item_defaults(forest):
    new_id = forest.add_item(NavLevel.PRIMARY)
    item = forest.get_item(new_id)
    assert item.level is NavLevel.PRIMARY
    assert item.parent_id is None
    assert item.collapsed is False
    assert item.label == ""


def test_add_under_unknown_parent_is_noop(forest):
    assert forest.add_item(NavLevel.SECONDARY, "missing") is None
    assert forest.ids() == []


def test_id_collision_is_retried():
    ids = SequenceIds("a", "a", "a", "b")
    forest = OrderedForest(id_generator=ids, config=NavConfig(seed_default_item=False))

    assert forest.add_item(NavLevel.PRIMARY) == "a"
    assert forest.add_item(NavLevel.PRIMARY) == "b"
    assert ids.calls == 4


def test_id_attempt_limit_raises():
    ids = SequenceIds("a", "a", "a")
    forest = OrderedForest(
        id_generator=ids,
        config=NavConfig(seed_default_item=False, max_id_attempts=2),
    )
    forest.add_item(NavLevel.PRIMARY)

    with pytest.raises(NavigationError):
        forest.add_item(NavLevel.PRIMARY)
    assert forest.ids() == ["a"]


def test_default_generator_produces_padded_ids():
    forest = OrderedForest(config=NavConfig(seed_default_item=False))
    new_id = forest.add_item(NavLevel.PRIMARY)
    assert len(new_id) == 6
    assert new_id.isdigit()


def test_delete_leaves_other_nodes(scenario):
    forest, ids = scenario
    p2 = forest.add_item(NavLevel.PRIMARY)
    s3 = forest.add_item(NavLevel.SECONDARY, p2)

    forest.delete_item(ids["P1"])

    assert forest.ids() == [p2, s3]
    assert_forest_invariants(forest)


def test_delete_unrelated_keeps_selection(scenario):
    forest, ids = scenario
    forest.select(ids["S2"])
    forest.delete_item(ids["S1"])
    assert forest.selected_id == ids["S2"]


def test_delete_unknown_is_noop(scenario):
    forest, ids = scenario
    before = forest.ids()
    assert forest.delete_item("missing") is False
    assert forest.ids() == before


def test_get_all_descendants_pre_order(scenario):
    forest, ids = scenario
    assert forest.get_all_descendants(ids["P1"]) == [ids["S1"], ids["T1"], ids["S2"]]
    assert forest.get_all_descendants(ids["T1"]) == []


def test_move_up_swaps_blocks(scenario):
    forest, ids = scenario
    assert forest.move_up(ids["S2"])
    assert forest.ids() == [ids["P1"], ids["S2"], ids["S1"], ids["T1"]]
    assert_forest_invariants(forest)


def test_move_up_then_down_restores_order(scenario):
    forest, ids = scenario
    original = forest.ids()
    forest.move_up(ids["S2"])
    forest.move_down(ids["S2"])
    assert forest.ids() == original


def test_root_moves_carry_whole_tree(scenario):
    forest, ids = scenario
    p2 = forest.add_item(NavLevel.PRIMARY)
    s3 = forest.add_item(NavLevel.SECONDARY, p2)

    assert forest.move_up(p2)

    assert forest.ids() == [p2, s3, ids["P1"], ids["S1"], ids["T1"], ids["S2"]]
    assert_forest_invariants(forest)


def test_boundary_moves_are_noops(scenario):
    forest, ids = scenario
    before = forest.ids()

    assert forest.can_move_up(ids["S1"]) is False
    assert forest.move_up(ids["S1"]) is False
    assert forest.can_move_down(ids["S2"]) is False
    assert forest.move_down(ids["S2"]) is False
    assert forest.can_move_up(ids["T1"]) is False
    assert forest.can_move_down(ids["T1"]) is False
    assert forest.ids() == before


def test_can_move_agrees_with_move(scenario):
    forest, ids = scenario
    forest.add_item(NavLevel.PRIMARY)

    for item_id in forest.ids():
        expected_up = forest.can_move_up(item_id)
        before = forest.ids()
        assert forest.move_up(item_id) is expected_up
        assert (forest.ids() != before) is expected_up
        assert_forest_invariants(forest)

        expected_down = forest.can_move_down(item_id)
        before = forest.ids()
        assert forest.move_down(item_id) is expected_down
        assert (forest.ids() != before) is expected_down
        assert_forest_invariants(forest)


def test_moves_on_unknown_id(forest):
    assert forest.can_move_up("missing") is False
    assert forest.move_down("missing") is False


def test_siblings_require_matching_level(forest):
    """A malformed record with the same parent but another level is not a sibling."""
    from navcard.core import NavItem

    p1 = forest.add_item(NavLevel.PRIMARY)
    s1 = forest.add_item(NavLevel.SECONDARY, p1)
    odd = forest.add_item(NavLevel.TERTIARY, p1)

    assert forest.get_item(odd) == NavItem(id=odd, level=NavLevel.TERTIARY, parent_id=p1)
    assert forest.can_move_down(s1) is False
    assert forest.can_move_up(odd) is False


def test_toggle_collapsed_flips_flag_only(scenario):
    forest, ids = scenario
    before = forest.ids()

    assert forest.toggle_collapsed(ids["S1"])
    assert forest.get_item(ids["S1"]).collapsed is True
    forest.toggle_collapsed(ids["S1"])
    assert forest.get_item(ids["S1"]).collapsed is False
    assert forest.ids() == before
    assert forest.toggle_collapsed("missing") is False


def test_update_merges_payload_fields(scenario):
    forest, ids = scenario
    assert forest.update(ids["S1"], {"label": "About", "url": "/about"})
    forest.update_page_title(ids["S1"], "About us")

    item = forest.get_item(ids["S1"])
    assert (item.label, item.page_title, item.url) == ("About", "About us", "/about")
    assert item.parent_id == ids["P1"]
    assert item.level is NavLevel.SECONDARY


def test_update_ignores_structural_fields(scenario):
    forest, ids = scenario
    assert forest.update(ids["S1"], {"parent_id": None, "level": "primary", "collapsed": True}) is False

    item = forest.get_item(ids["S1"])
    assert item.parent_id == ids["P1"]
    assert item.collapsed is False
    assert forest.update("missing", {"label": "x"}) is False


def test_returned_records_are_copies(scenario):
    forest, ids = scenario
    item = forest.get_item(ids["S1"])
    item.label = "changed outside"
    assert forest.get_item(ids["S1"]).label == ""


def test_seed_default_item_once():
    forest = OrderedForest()
    assert forest.ensure_initialized() is True
    assert forest.ids() == ["000001"]
    assert forest.get_item("000001").label == "Home"

    forest.delete_item("000001")
    assert forest.ensure_initialized() is False
    assert forest.ids() == []


def test_seed_skipped_for_existing_data(forest):
    forest._config = NavConfig()
    forest.add_item(NavLevel.PRIMARY)
    assert forest.ensure_initialized() is False
    assert "000001" not in forest


def test_level_enforcement(forest):
    forest._config = NavConfig(seed_default_item=False, enforce_level_hierarchy=True)
    p1 = forest.add_item(NavLevel.PRIMARY)
    s1 = forest.add_item(NavLevel.SECONDARY, p1)

    assert forest.add_item(NavLevel.TERTIARY, p1) is None
    assert forest.add_item(NavLevel.SECONDARY) is None
    assert forest.add_item(NavLevel.SECONDARY, s1) is None
    assert forest.add_item(NavLevel.TERTIARY, s1) is not None


def test_addable_levels_follow_selection(scenario):
    forest, ids = scenario
    forest.select(None)
    assert forest.addable_levels() == [NavLevel.PRIMARY]
    forest.select(ids["P1"])
    assert forest.addable_levels() == [NavLevel.PRIMARY, NavLevel.SECONDARY]
    forest.select(ids["S2"])
    assert forest.addable_levels() == [NavLevel.PRIMARY, NavLevel.TERTIARY]
    forest.select(ids["T1"])
    assert forest.addable_levels() == [NavLevel.PRIMARY]


def test_select_unknown_is_rejected(scenario):
    forest, ids = scenario
    forest.select(ids["S1"])
    assert forest.select("missing") is False
    assert forest.selected_id == ids["S1"]


def test_cyclic_parents_terminate(forest):
    """Corrupted parent links do not loop forever."""
    from navcard.core import NavItem

    forest._records.set("a", NavItem(id="a", level=NavLevel.SECONDARY, parent_id="b"))
    forest._records.set("b", NavItem(id="b", level=NavLevel.SECONDARY, parent_id="a"))
    forest._order.replace(["a", "b"])

    assert forest.get_all_descendants("a") == ["b"]
    assert forest.can_move_up("b") is False
    assert forest.move_down("a") is False
    assert forest.delete_item("a")
    assert forest.ids() == []


def test_reopened_stores_are_not_reseeded():
    from navcard.io import InMemoryOrderStore, InMemoryRecordStore

    records, order = InMemoryRecordStore(), InMemoryOrderStore()
    first = OrderedForest(records=records, order=order, config=NavConfig())
    assert first.ensure_initialized() is True
    first.delete_item("000001")

    reopened = OrderedForest(records=records, order=order, config=NavConfig())
    assert reopened.ensure_initialized() is False
    assert order.get() == []
    assert order.is_initialized() is True


def test_initialized_flag_set_without_seeding(forest):
    assert forest.ensure_initialized() is False
    assert forest._order.is_initialized() is True


class FailingDeleteRecords:
    """Record store whose deletes start failing after a number of calls."""

    def __init__(self, fail_after):
        from navcard.io import InMemoryRecordStore

        self._inner = InMemoryRecordStore()
        self._fail_after = fail_after
        self.get = self._inner.get
        self.set = self._inner.set
        self.keys = self._inner.keys

    def delete(self, item_id):
        if self._fail_after <= 0:
            raise OSError("record store unavailable")
        self._fail_after -= 1
        self._inner.delete(item_id)

    def __contains__(self, item_id):
        return item_id in self._inner


class FailingOrder:
    """Order store whose replace fails once armed."""

    def __init__(self):
        from navcard.io import InMemoryOrderStore

        self._inner = InMemoryOrderStore()
        self.armed = False
        self.get = self._inner.get
        self.is_initialized = self._inner.is_initialized
        self.mark_initialized = self._inner.mark_initialized

    def replace(self, ids):
        if self.armed:
            self.armed = False
            raise OSError("order store unavailable")
        self._inner.replace(ids)


def test_failed_cascade_delete_restores_state():
    records = FailingDeleteRecords(fail_after=1)
    forest = OrderedForest(records=records, config=NavConfig(seed_default_item=False))
    p1 = forest.add_item(NavLevel.PRIMARY)
    s1 = forest.add_item(NavLevel.SECONDARY, p1)
    forest.select(s1)
    before = forest.ids()

    with pytest.raises(OSError):
        forest.delete_item(p1)

    assert forest.ids() == before
    assert forest.get_item(s1).parent_id == p1
    assert forest.selected_id == s1
    assert_forest_invariants(forest)


def test_failed_order_write_on_add_restores_state():
    order = FailingOrder()
    forest = OrderedForest(order=order, config=NavConfig(seed_default_item=False))
    p1 = forest.add_item(NavLevel.PRIMARY)
    order.armed = True

    with pytest.raises(OSError):
        forest.add_item(NavLevel.SECONDARY, p1)

    assert forest.ids() == [p1]
    assert forest.selected_id == p1
    assert_forest_invariants(forest)


def test_random_operation_sequences_keep_invariants(forest):
    import random

    rng = random.Random(20261016)
    for _ in range(400):
        ids = forest.ids()
        action = rng.choice(["add", "add", "delete", "up", "down", "toggle"])
        if action == "add" or not ids:
            parents = [i for i in ids if forest.get_item(i).level.child_level is not None]
            parent_id = rng.choice(parents + [None])
            level = NavLevel.PRIMARY if parent_id is None else forest.get_item(parent_id).level.child_level
            forest.add_item(level, parent_id)
        else:
            target = rng.choice(ids)
            if action == "delete":
                expected = set(ids) - set(forest.get_block(target))
                forest.delete_item(target)
                assert set(forest.ids()) == expected
            elif action == "up":
                forest.move_up(target)
            elif action == "down":
                forest.move_down(target)
            else:
                forest.toggle_collapsed(target)
        assert_forest_invariants(forest)
        assert forest.selected_id is None or forest.selected_id in forest
