from __future__ import annotations

import copy

from kothscale.merge import deep_merge


def test_merge_preserves_foreign_keys() -> None:
    target = {"settings": {"zone": {"a": 0, "b": 2}, "other": True}}

    result = deep_merge(target["settings"], {"zone": {"a": 1}})

    assert result is target["settings"]
    assert target == {"settings": {"zone": {"a": 1, "b": 2}, "other": True}}


def test_rewards_merge_by_name() -> None:
    target = {"rewards": [{"name": "X", "xp": 1}]}

    deep_merge(target, {"rewards": [{"name": "X", "xp": 9}, {"name": "Y", "xp": 5}]})

    assert target["rewards"] == [{"name": "X", "xp": 9}, {"name": "Y", "xp": 5}]


def test_rewards_merge_keeps_unmatched_target_entries_in_place() -> None:
    target = {
        "rewards": [
            {"name": "A", "xp": 1, "$": 1, "icon": "a.png"},
            {"name": "Custom", "xp": 7},
            {"name": "B", "xp": 2},
        ]
    }
    source = {"rewards": [{"name": "B", "xp": 20}, {"name": "A", "xp": 10, "$": 10}, {"name": "C", "xp": 30}]}

    deep_merge(target, source)

    assert target["rewards"] == [
        {"name": "A", "xp": 10, "$": 10, "icon": "a.png"},
        {"name": "Custom", "xp": 7},
        {"name": "B", "xp": 20},
        {"name": "C", "xp": 30},
    ]


def test_reward_entry_without_name_is_appended() -> None:
    target = {"rewards": [{"name": "A", "xp": 1}]}

    deep_merge(target, {"rewards": [{"xp": 3}]})

    assert target["rewards"] == [{"name": "A", "xp": 1}, {"xp": 3}]


def test_other_lists_are_replaced_wholesale() -> None:
    target = {"zone": {"layers": ["a", "b", "c"], "keep": 1}}
    source = {"zone": {"layers": [{"id": 1}]}}

    deep_merge(target, source)

    assert target == {"zone": {"layers": [{"id": 1}], "keep": 1}}
    assert target["zone"]["layers"] is not source["zone"]["layers"]
    assert target["zone"]["layers"][0] is not source["zone"]["layers"][0]


def test_source_is_never_mutated() -> None:
    target = {"zone": {"a": 0}, "rewards": [{"name": "X", "xp": 1}]}
    source = {"zone": {"a": 1, "nested": {"b": 2}}, "rewards": [{"name": "X", "xp": 9}, {"name": "Y", "xp": 5}]}
    snapshot = copy.deepcopy(source)

    deep_merge(target, source)
    target["zone"]["nested"]["b"] = 99
    target["rewards"][1]["xp"] = 99

    assert source == snapshot


def test_mapping_overwrites_scalar_and_scalar_overwrites_mapping() -> None:
    target = {"zone": 5, "economy": {"x": 1}}

    deep_merge(target, {"zone": {"a": 1}, "economy": 2})

    assert target == {"zone": {"a": 1}, "economy": 2}


def test_rewards_key_replaces_non_list_target() -> None:
    target = {"rewards": None}

    deep_merge(target, {"rewards": [{"name": "X", "xp": 1}]})

    assert target == {"rewards": [{"name": "X", "xp": 1}]}


def test_custom_keyed_lists() -> None:
    target = {"bonuses": [{"id": 1, "v": 0}, {"id": 2, "v": 0}], "rewards": [{"name": "X", "xp": 1}]}

    deep_merge(
        target,
        {"bonuses": [{"id": 2, "v": 5}], "rewards": [{"name": "Y", "xp": 2}]},
        keyed_lists={"bonuses": "id"},
    )

    assert target["bonuses"] == [{"id": 1, "v": 0}, {"id": 2, "v": 5}]
    # rewards is not keyed here, so it is replaced
    assert target["rewards"] == [{"name": "Y", "xp": 2}]


def test_unhashable_reward_names_never_match() -> None:
    target = {"rewards": [{"name": ["x"], "xp": 1}, {"name": "X", "xp": 1}]}

    deep_merge(target, {"rewards": [{"name": "X", "xp": 9}, {"name": {"odd": 1}, "xp": 4}]})

    assert target["rewards"] == [
        {"name": ["x"], "xp": 1},
        {"name": "X", "xp": 9},
        {"name": {"odd": 1}, "xp": 4},
    ]
