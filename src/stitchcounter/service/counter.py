# SPDX-License-Identifier: MIT

from typing import Any, Optional, cast

from loguru import logger

from stitchcounter.configuration import DEFAULT_COUNTER_MAX
from stitchcounter.model.counter import Counter, CounterLink, CounterPatch
from stitchcounter.model.entity_id import EntityId
from stitchcounter.model.project import Project
from stitchcounter.service.error import (
    InvalidOperationError,
    NotFoundError,
    ValidationError,
)
from stitchcounter.template.counter import get_counter_template


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(value, maximum))


def has_trigger(counter: Counter) -> bool:
    """
    Check whether a linked counter has a usable trigger.

    Stale records with a missing, zero or negative trigger never cascade.
    """
    trigger_value = counter.get("trigger_value")
    return is_integer(trigger_value) and cast(int, trigger_value) > 0


# ─────────────────────────────────────────────────────────────
# Lookups
# ─────────────────────────────────────────────────────────────


def find_counter(project: Project, counter_id: Optional[EntityId]) -> Optional[Counter]:
    if counter_id is None:
        return None
    for counter in project["counters"]:
        if counter["id"] == counter_id:
            return counter
    return None


def get_counter(project: Project, counter_id: EntityId) -> Counter:
    counter = find_counter(project, counter_id)
    if counter is None:
        raise NotFoundError("counter", counter_id)
    return counter


def get_link_target(project: Project, counter: Counter) -> Optional[Counter]:
    """Return the parent of a linked counter, or None if unlinked or dangling."""
    return find_counter(project, counter["linked_to_counter_id"])


def get_linked_children(project: Project, counter_id: EntityId) -> list[Counter]:
    return [
        counter
        for counter in project["counters"]
        if counter["linked_to_counter_id"] == counter_id and counter["id"] != counter_id
    ]


def is_linked_parent(project: Project, counter_id: EntityId) -> bool:
    return len(get_linked_children(project, counter_id)) > 0


def linkable_counters(
    project: Project, counter_id: Optional[EntityId] = None
) -> list[Counter]:
    """Counters that may be chosen as a link target, excluding the edited one."""
    return [counter for counter in project["counters"] if counter["id"] != counter_id]


def project_progress(project: Project) -> tuple[int, int]:
    """
    Sum of (value - min) and (max - min) over the bounded counters.

    Open-ended counters (max at the default ceiling) have no meaningful
    completion and are left out.
    """
    done = 0
    total = 0
    for counter in project["counters"]:
        if counter["max"] >= DEFAULT_COUNTER_MAX:
            continue
        done += counter["value"] - counter["min"]
        total += counter["max"] - counter["min"]
    return done, total


# ─────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────


def validate_project_name(name: Any) -> str:
    if not isinstance(name, str) or name.strip() == "":
        raise ValidationError("name", "Project name is required")
    return name.strip()


def validate_counter_fields(
    project: Project,
    name: Any,
    min: Any,
    max: Any,
    step: Any,
    link: Optional[CounterLink],
    counter_id: Optional[EntityId] = None,
) -> None:
    """
    Validate counter fields, reporting the first failing check.

    The checks run in a fixed order: name, bounds are integers, step,
    min below max, then the link target and trigger.
    """
    if not isinstance(name, str) or name.strip() == "":
        raise ValidationError("name", "Counter name is required")
    if not is_integer(min):
        raise ValidationError("min", f"Min must be an integer. Got: {min!r}")
    if not is_integer(max):
        raise ValidationError("max", f"Max must be an integer. Got: {max!r}")
    if not is_integer(step) or step < 1:
        raise ValidationError("step", f"Step must be an integer >= 1. Got: {step!r}")
    if min >= max:
        raise ValidationError("max", f"Max ({max}) must be greater than min ({min})")

    if link is not None:
        target_counter_id = link.get("target_counter_id")
        if counter_id is not None and target_counter_id == counter_id:
            raise ValidationError("link", "A counter cannot be linked to itself")
        if find_counter(project, target_counter_id) is None:
            raise ValidationError(
                "link", f"Linked counter not found: {target_counter_id}"
            )
        trigger_value = link.get("trigger_value")
        if not is_integer(trigger_value) or trigger_value < 1:
            raise ValidationError(
                "trigger_value",
                f"Trigger value must be an integer >= 1. Got: {trigger_value!r}",
            )


# ─────────────────────────────────────────────────────────────
# State transitions
# ─────────────────────────────────────────────────────────────


def create_counter(
    project: Project,
    name: str,
    min: int,
    max: int,
    step: int,
    link: Optional[CounterLink] = None,
    is_manually_disabled: bool = False,
) -> Counter:
    validate_counter_fields(project, name, min, max, step, link)

    counter = get_counter_template()
    counter["name"] = name.strip()
    counter["min"] = min
    counter["max"] = max
    counter["step"] = step
    # Counters always start at their floor
    counter["value"] = min
    if link is not None:
        counter["linked_to_counter_id"] = link["target_counter_id"]
        counter["trigger_value"] = link["trigger_value"]
    counter["is_manually_disabled"] = bool(is_manually_disabled)

    project["counters"].append(counter)
    return counter


def update_counter(
    project: Project, counter_id: EntityId, patch: CounterPatch
) -> Counter:
    """
    Apply a partial edit to a counter and re-clamp its value.

    An existing link is carried over untouched unless the patch names a
    new one, so a counter whose parent was deleted stays editable.
    """
    counter = get_counter(project, counter_id)

    name = patch.get("name", counter["name"])
    min = patch.get("min", counter["min"])
    max = patch.get("max", counter["max"])
    step = patch.get("step", counter["step"])
    is_manually_disabled = patch.get(
        "is_manually_disabled", counter["is_manually_disabled"]
    )

    link = patch.get("link")
    validate_counter_fields(project, name, min, max, step, link, counter_id)

    counter["name"] = name.strip()
    counter["min"] = min
    counter["max"] = max
    counter["step"] = step
    counter["is_manually_disabled"] = bool(is_manually_disabled)
    if "link" in patch:
        if link is None:
            counter["linked_to_counter_id"] = None
            counter["trigger_value"] = None
        else:
            counter["linked_to_counter_id"] = link["target_counter_id"]
            counter["trigger_value"] = link["trigger_value"]

    # Applied on every edit, not only when the range changed
    counter["value"] = clamp(counter["value"], counter["min"], counter["max"])
    return counter


def increment_counter(project: Project, counter_id: EntityId) -> list[EntityId]:
    """
    Advance a counter by its step and cascade one level to linked children.

    A child advances by its own step when the parent's new value is a
    positive multiple of the child's trigger value. Grandchildren are never
    evaluated, so link cycles cannot loop.

    Returns the ids of the children that were triggered.
    """
    counter = get_counter(project, counter_id)
    if counter["is_manually_disabled"]:
        raise InvalidOperationError(
            f"Counter '{counter['name']}' only changes through its linked counter",
            counter_id,
        )
    if counter["value"] >= counter["max"]:
        raise InvalidOperationError(
            f"Counter '{counter['name']}' is already at its maximum ({counter['max']})",
            counter_id,
        )

    new_value = clamp(
        counter["value"] + counter["step"], counter["min"], counter["max"]
    )
    counter["value"] = new_value

    triggered_counter_ids: list[EntityId] = []
    for child in get_linked_children(project, counter_id):
        if not has_trigger(child):
            continue
        trigger_value = cast(int, child["trigger_value"])
        if new_value > 0 and new_value % trigger_value == 0:
            # Manual disable does not block a cascade
            child["value"] = clamp(
                child["value"] + child["step"], child["min"], child["max"]
            )
            triggered_counter_ids.append(child["id"])
            logger.debug(
                "cascade: {} reached {}, advanced {} to {}",
                counter["name"],
                new_value,
                child["name"],
                child["value"],
            )

    return triggered_counter_ids


def decrement_counter(project: Project, counter_id: EntityId) -> None:
    """Step a counter down. Decrements never cascade."""
    counter = get_counter(project, counter_id)
    if counter["is_manually_disabled"]:
        raise InvalidOperationError(
            f"Counter '{counter['name']}' only changes through its linked counter",
            counter_id,
        )
    if counter["value"] <= counter["min"]:
        raise InvalidOperationError(
            f"Counter '{counter['name']}' is already at its minimum ({counter['min']})",
            counter_id,
        )

    counter["value"] = clamp(
        counter["value"] - counter["step"], counter["min"], counter["max"]
    )


def reset_counter(project: Project, counter_id: EntityId) -> list[EntityId]:
    """
    Reset a counter and every counter linked to it back to their floors.

    Returns the ids of the children that were reset.
    """
    counter = get_counter(project, counter_id)
    counter["value"] = counter["min"]

    reset_counter_ids: list[EntityId] = []
    for child in get_linked_children(project, counter_id):
        child["value"] = child["min"]
        reset_counter_ids.append(child["id"])
    return reset_counter_ids


def delete_counter(project: Project, counter_id: EntityId) -> Counter:
    """
    Remove a counter from its project.

    Counters linked to it keep their now dangling reference.
    """
    counter = get_counter(project, counter_id)
    project["counters"] = [c for c in project["counters"] if c["id"] != counter_id]
    return counter
