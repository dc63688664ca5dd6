# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

from stitchcounter.model.entity_id import EntityId

CounterState = Literal["disabled", "at_max", "at_min", "normal"]


class Counter(TypedDict):
    id: EntityId
    name: str  # e.g., "Rows"
    value: int
    min: int
    max: int
    step: int

    # Weak reference to another counter in the same project, may dangle
    linked_to_counter_id: Optional[EntityId]
    # Parent value modulus that advances this counter
    trigger_value: Optional[int]

    # Only a parent cascade may change the value
    is_manually_disabled: bool


class CounterLink(TypedDict):
    target_counter_id: EntityId
    trigger_value: int


class CounterPatch(TypedDict, total=False):
    name: str
    min: int
    max: int
    step: int
    link: Optional[CounterLink]  # None removes the link
    is_manually_disabled: bool
