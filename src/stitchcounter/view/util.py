# SPDX-License-Identifier: MIT

from stitchcounter.configuration import DEFAULT_COUNTER_MAX
from stitchcounter.model.counter import Counter, CounterState
from stitchcounter.model.project import Project
from stitchcounter.service.counter import get_link_target, has_trigger

STATE_COLORS: dict[CounterState, str] = {
    "disabled": "blue",
    "at_max": "red",
    "at_min": "bright_black",
    "normal": "green",
}


def is_at_max(counter: Counter) -> bool:
    return counter["value"] >= counter["max"]


def is_at_min(counter: Counter) -> bool:
    return counter["value"] <= counter["min"]


def counter_state(counter: Counter) -> CounterState:
    """
    Derive the display state of a counter.

    Disabled wins over the bounds so an auto-only counter at its ceiling
    still reads as auto-only.
    """
    if counter["is_manually_disabled"]:
        return "disabled"
    if is_at_max(counter):
        return "at_max"
    if is_at_min(counter):
        return "at_min"
    return "normal"


def describe_counter(project: Project, counter: Counter) -> str:
    """Human readable rule, e.g. "+1 every 8 rows"."""
    if has_trigger(counter):
        parent = get_link_target(project, counter)
        if parent is not None:
            return (
                f"+{counter['step']} every {counter['trigger_value']} "
                f"{parent['name'].lower()}"
            )
    if counter["is_manually_disabled"]:
        return "Auto-increment only"
    return f"+{counter['step']} per tap"


def format_range(counter: Counter) -> str:
    minimum = counter["min"]
    maximum = counter["max"]

    if maximum >= DEFAULT_COUNTER_MAX:
        return f"{minimum}+"
    if maximum >= 1000:
        return f"{minimum}-{(maximum + 500) // 1000}k"
    return f"{minimum}-{maximum}"


def should_show_range(counter: Counter) -> bool:
    # Only the default open-ended 0+ range is hidden
    return counter["max"] < DEFAULT_COUNTER_MAX or counter["min"] != 0


def format_progress(done: int, total: int) -> str:
    if total <= 0:
        return ""
    return f"{done}/{total} ({done * 100 // total}%)"
