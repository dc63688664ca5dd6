"""Tests for the counter state transitions."""

import pytest

from stitchcounter.service import counter as counter_service
from stitchcounter.service.error import (
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from tests.unit.fakes import make_counter, make_project


# ─────────────────────────────────────────────────────────────
# create_counter
# ─────────────────────────────────────────────────────────────


def test_create_counter_starts_at_min_and_is_appended() -> None:
    """New counters start at their floor and keep insertion order."""
    project = make_project(make_counter("Rows"))

    counter = counter_service.create_counter(project, "Stitches", 5, 50, 2)

    assert counter["value"] == 5
    assert counter["is_manually_disabled"] is False
    assert counter["linked_to_counter_id"] is None
    assert [c["name"] for c in project["counters"]] == ["Rows", "Stitches"]


def test_create_counter_strips_name() -> None:
    project = make_project()

    counter = counter_service.create_counter(project, "  Rows  ", 0, 10, 1)

    assert counter["name"] == "Rows"


def test_create_counter_with_link_stores_target_and_trigger() -> None:
    parent = make_counter("Rows")
    project = make_project(parent)

    child = counter_service.create_counter(
        project,
        "Repeats",
        0,
        100,
        1,
        {"target_counter_id": parent["id"], "trigger_value": 8},
        is_manually_disabled=True,
    )

    assert child["linked_to_counter_id"] == parent["id"]
    assert child["trigger_value"] == 8
    assert child["is_manually_disabled"] is True


@pytest.mark.parametrize(
    ("name", "min", "max", "step", "field"),
    [
        ("   ", 0, 10, 1, "name"),
        ("Rows", 1.5, 10, 1, "min"),
        ("Rows", 0, "10", 1, "max"),
        ("Rows", True, 10, 1, "min"),
        ("Rows", 0, 10, 0, "step"),
        ("Rows", 0, 10, 2.0, "step"),
        ("Rows", 5, 5, 1, "max"),
        ("Rows", 10, 5, 1, "max"),
    ],
)
def test_create_counter_rejects_invalid_fields(
    name: object, min: object, max: object, step: object, field: str
) -> None:
    """Each invalid field is reported and nothing is appended."""
    project = make_project()

    with pytest.raises(ValidationError) as exc_info:
        counter_service.create_counter(
            project, name, min, max, step  # type: ignore[arg-type]
        )

    assert exc_info.value.field == field
    assert project["counters"] == []


def test_create_counter_reports_first_failing_check() -> None:
    """An empty name is reported before bad bounds."""
    project = make_project()

    with pytest.raises(ValidationError) as exc_info:
        counter_service.create_counter(project, "", 5, 5, 0)

    assert exc_info.value.field == "name"


def test_create_counter_rejects_missing_link_target() -> None:
    project = make_project(make_counter("Rows"))

    with pytest.raises(ValidationError) as exc_info:
        counter_service.create_counter(
            project,
            "Repeats",
            0,
            10,
            1,
            {"target_counter_id": "missing", "trigger_value": 4},
        )

    assert exc_info.value.field == "link"
    assert len(project["counters"]) == 1


@pytest.mark.parametrize("trigger_value", [0, -3, None, 2.5])
def test_create_counter_rejects_bad_trigger(trigger_value: object) -> None:
    parent = make_counter("Rows")
    project = make_project(parent)

    with pytest.raises(ValidationError) as exc_info:
        counter_service.create_counter(
            project,
            "Repeats",
            0,
            10,
            1,
            {
                "target_counter_id": parent["id"],
                "trigger_value": trigger_value,  # type: ignore[typeddict-item]
            },
        )

    assert exc_info.value.field == "trigger_value"


# ─────────────────────────────────────────────────────────────
# update_counter
# ─────────────────────────────────────────────────────────────


def test_update_counter_clamps_value_to_new_max() -> None:
    counter = make_counter("Rows", value=15, max=100)
    project = make_project(counter)

    updated = counter_service.update_counter(project, counter["id"], {"max": 10})

    assert updated["max"] == 10
    assert updated["value"] == 10


def test_update_counter_clamps_value_to_new_min() -> None:
    counter = make_counter("Rows", value=3, max=100)
    project = make_project(counter)

    updated = counter_service.update_counter(project, counter["id"], {"min": 20})

    assert updated["value"] == 20


def test_update_counter_keeps_value_inside_range() -> None:
    counter = make_counter("Rows", value=7, max=100)
    project = make_project(counter)

    updated = counter_service.update_counter(project, counter["id"], {"name": "Row"})

    assert updated["value"] == 7
    assert updated["name"] == "Row"


def test_update_counter_validates_merged_result() -> None:
    """A new min checked against the existing max."""
    counter = make_counter("Rows", value=3, max=10)
    project = make_project(counter)

    with pytest.raises(ValidationError) as exc_info:
        counter_service.update_counter(project, counter["id"], {"min": 10})

    assert exc_info.value.field == "max"
    assert counter["min"] == 0
    assert counter["value"] == 3


def test_update_counter_missing_raises_not_found() -> None:
    project = make_project(make_counter("Rows"))

    with pytest.raises(NotFoundError):
        counter_service.update_counter(project, "missing", {"name": "x"})


def test_update_counter_sets_and_removes_link() -> None:
    parent = make_counter("Rows")
    child = make_counter("Repeats")
    project = make_project(parent, child)

    counter_service.update_counter(
        project,
        child["id"],
        {"link": {"target_counter_id": parent["id"], "trigger_value": 4}},
    )
    assert child["linked_to_counter_id"] == parent["id"]
    assert child["trigger_value"] == 4

    counter_service.update_counter(project, child["id"], {"link": None})
    assert child["linked_to_counter_id"] is None
    assert child["trigger_value"] is None


def test_update_counter_rejects_self_link() -> None:
    counter = make_counter("Rows")
    project = make_project(counter)

    with pytest.raises(ValidationError) as exc_info:
        counter_service.update_counter(
            project,
            counter["id"],
            {"link": {"target_counter_id": counter["id"], "trigger_value": 2}},
        )

    assert exc_info.value.field == "link"


def test_update_counter_keeps_dangling_link_when_not_patched() -> None:
    """A counter whose parent was deleted can still be renamed."""
    child = make_counter("Repeats", linked_to_counter_id="gone", trigger_value=4)
    project = make_project(child)

    updated = counter_service.update_counter(project, child["id"], {"name": "Reps"})

    assert updated["name"] == "Reps"
    assert updated["linked_to_counter_id"] == "gone"


# ─────────────────────────────────────────────────────────────
# increment_counter
# ─────────────────────────────────────────────────────────────


def test_increment_counter_adds_step() -> None:
    counter = make_counter("Rows", step=3, max=100)
    project = make_project(counter)

    triggered = counter_service.increment_counter(project, counter["id"])

    assert counter["value"] == 3
    assert triggered == []


def test_increment_counter_clamps_to_max() -> None:
    counter = make_counter("Rows", value=9, step=5, max=10)
    project = make_project(counter)

    counter_service.increment_counter(project, counter["id"])

    assert counter["value"] == 10


def test_increment_counter_at_max_is_rejected() -> None:
    counter = make_counter("Rows", value=10, max=10)
    project = make_project(counter)

    with pytest.raises(InvalidOperationError):
        counter_service.increment_counter(project, counter["id"])

    assert counter["value"] == 10


def test_increment_counter_manually_disabled_is_rejected() -> None:
    counter = make_counter("Repeats", value=2, is_manually_disabled=True)
    project = make_project(counter)

    with pytest.raises(InvalidOperationError):
        counter_service.increment_counter(project, counter["id"])

    assert counter["value"] == 2


def test_increment_counter_missing_raises_not_found() -> None:
    project = make_project()

    with pytest.raises(NotFoundError):
        counter_service.increment_counter(project, "missing")


def test_increment_counter_cascades_on_trigger_multiple() -> None:
    parent = make_counter("Rows", value=3)
    child = make_counter(
        "Repeats", linked_to_counter_id=parent["id"], trigger_value=4, step=2
    )
    project = make_project(parent, child)

    triggered = counter_service.increment_counter(project, parent["id"])

    assert parent["value"] == 4
    assert child["value"] == 2
    assert triggered == [child["id"]]


def test_increment_counter_does_not_cascade_off_trigger() -> None:
    parent = make_counter("Rows", value=1)
    child = make_counter("Repeats", linked_to_counter_id=parent["id"], trigger_value=4)
    project = make_project(parent, child)

    triggered = counter_service.increment_counter(project, parent["id"])

    assert child["value"] == 0
    assert triggered == []


def test_increment_counter_fans_out_to_every_child() -> None:
    parent = make_counter("Rows", value=5)
    every_two = make_counter("A", linked_to_counter_id=parent["id"], trigger_value=2)
    every_three = make_counter("B", linked_to_counter_id=parent["id"], trigger_value=3)
    every_four = make_counter("C", linked_to_counter_id=parent["id"], trigger_value=4)
    project = make_project(parent, every_two, every_three, every_four)

    triggered = counter_service.increment_counter(project, parent["id"])

    assert parent["value"] == 6
    assert triggered == [every_two["id"], every_three["id"]]
    assert every_four["value"] == 0


def test_increment_counter_does_not_cascade_to_grandchildren() -> None:
    parent = make_counter("Rows")
    child = make_counter("Repeats", linked_to_counter_id=parent["id"], trigger_value=1)
    grandchild = make_counter(
        "Sections", linked_to_counter_id=child["id"], trigger_value=1
    )
    project = make_project(parent, child, grandchild)

    triggered = counter_service.increment_counter(project, parent["id"])

    assert child["value"] == 1
    assert grandchild["value"] == 0
    assert triggered == [child["id"]]


def test_increment_counter_cycle_stops_after_one_hop() -> None:
    first = make_counter("A")
    second = make_counter("B", linked_to_counter_id=first["id"], trigger_value=1)
    first["linked_to_counter_id"] = second["id"]
    first["trigger_value"] = 1
    project = make_project(first, second)

    triggered = counter_service.increment_counter(project, first["id"])

    assert first["value"] == 1
    assert second["value"] == 1
    assert triggered == [second["id"]]


def test_increment_counter_cascade_ignores_manual_disable() -> None:
    parent = make_counter("Rows")
    child = make_counter(
        "Repeats",
        linked_to_counter_id=parent["id"],
        trigger_value=1,
        is_manually_disabled=True,
    )
    project = make_project(parent, child)

    counter_service.increment_counter(project, parent["id"])

    assert child["value"] == 1


def test_increment_counter_cascade_clamps_child_to_max() -> None:
    parent = make_counter("Rows")
    child = make_counter(
        "Repeats", linked_to_counter_id=parent["id"], trigger_value=1, value=5, max=5
    )
    project = make_project(parent, child)

    counter_service.increment_counter(project, parent["id"])

    assert child["value"] == 5


@pytest.mark.parametrize("trigger_value", [None, 0, -2])
def test_increment_counter_stale_trigger_never_cascades(trigger_value: object) -> None:
    parent = make_counter("Rows")
    child = make_counter(
        "Repeats", linked_to_counter_id=parent["id"], trigger_value=trigger_value
    )
    project = make_project(parent, child)

    triggered = counter_service.increment_counter(project, parent["id"])

    assert child["value"] == 0
    assert triggered == []


def test_increment_counter_zero_value_never_cascades() -> None:
    """A parent that lands on 0 (negative range) does not trigger."""
    parent = make_counter("Offset", min=-5, value=-1, max=5)
    child = make_counter("Repeats", linked_to_counter_id=parent["id"], trigger_value=1)
    project = make_project(parent, child)

    triggered = counter_service.increment_counter(project, parent["id"])

    assert parent["value"] == 0
    assert triggered == []


# ─────────────────────────────────────────────────────────────
# decrement_counter / reset_counter / delete_counter
# ─────────────────────────────────────────────────────────────


def test_decrement_counter_subtracts_step_and_clamps() -> None:
    counter = make_counter("Rows", value=3, step=2)
    project = make_project(counter)

    counter_service.decrement_counter(project, counter["id"])
    assert counter["value"] == 1

    counter_service.decrement_counter(project, counter["id"])
    assert counter["value"] == 0


def test_decrement_counter_at_min_is_rejected() -> None:
    counter = make_counter("Rows")
    project = make_project(counter)

    with pytest.raises(InvalidOperationError):
        counter_service.decrement_counter(project, counter["id"])

    assert counter["value"] == 0


def test_decrement_counter_manually_disabled_is_rejected() -> None:
    counter = make_counter("Repeats", value=4, is_manually_disabled=True)
    project = make_project(counter)

    with pytest.raises(InvalidOperationError):
        counter_service.decrement_counter(project, counter["id"])

    assert counter["value"] == 4


def test_decrement_counter_never_cascades() -> None:
    parent = make_counter("Rows", value=4)
    child = make_counter(
        "Repeats", linked_to_counter_id=parent["id"], trigger_value=3, value=1
    )
    project = make_project(parent, child)

    counter_service.decrement_counter(project, parent["id"])

    assert parent["value"] == 3
    assert child["value"] == 1


def test_reset_counter_resets_parent_and_children() -> None:
    parent = make_counter("Rows", value=40)
    first = make_counter(
        "Repeats", linked_to_counter_id=parent["id"], value=5, min=1, trigger_value=8
    )
    second = make_counter(
        "Sections",
        linked_to_counter_id=parent["id"],
        value=2,
        is_manually_disabled=True,
    )
    unrelated = make_counter("Stitches", value=9)
    project = make_project(parent, first, second, unrelated)

    reset_ids = counter_service.reset_counter(project, parent["id"])

    assert parent["value"] == 0
    assert first["value"] == 1
    assert second["value"] == 0
    assert unrelated["value"] == 9
    assert reset_ids == [first["id"], second["id"]]


def test_reset_counter_missing_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        counter_service.reset_counter(make_project(), "missing")


def test_delete_counter_leaves_dangling_links() -> None:
    parent = make_counter("Rows")
    child = make_counter("Repeats", linked_to_counter_id=parent["id"], trigger_value=1)
    project = make_project(parent, child)

    counter_service.delete_counter(project, parent["id"])

    assert project["counters"] == [child]
    assert child["linked_to_counter_id"] == parent["id"]
    assert counter_service.get_link_target(project, child) is None


def test_delete_counter_missing_raises_not_found() -> None:
    with pytest.raises(NotFoundError):
        counter_service.delete_counter(make_project(), "missing")


# ─────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────


def test_linkable_counters_excludes_edited_counter() -> None:
    rows = make_counter("Rows")
    repeats = make_counter("Repeats")
    project = make_project(rows, repeats)

    assert counter_service.linkable_counters(project, rows["id"]) == [repeats]
    assert counter_service.linkable_counters(project) == [rows, repeats]


def test_is_linked_parent() -> None:
    parent = make_counter("Rows")
    child = make_counter("Repeats", linked_to_counter_id=parent["id"], trigger_value=2)
    project = make_project(parent, child)

    assert counter_service.is_linked_parent(project, parent["id"]) is True
    assert counter_service.is_linked_parent(project, child["id"]) is False


def test_project_progress_skips_open_ended_counters() -> None:
    project = make_project(
        make_counter("Rows", value=30, max=120),
        make_counter("Repeats", value=2, min=1, max=5),
        make_counter("Total", value=500, max=999999),
    )

    assert counter_service.project_progress(project) == (31, 124)
