# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from stitchcounter.model.counter import Counter
from stitchcounter.model.entity_id import EntityId


class Project(TypedDict):
    id: EntityId
    name: str  # e.g., "Cabled sweater"
    description: Optional[str]
    counters: list[Counter]  # display order
    is_active: bool  # False once completed
    is_expanded: bool  # display state, persisted with the data
    created_at: pendulum.DateTime


class ProjectPatch(TypedDict, total=False):
    name: str
    description: Optional[str]
    is_active: bool
    is_expanded: bool


class IncrementResult(TypedDict):
    project: Project
    triggered_counter_ids: list[EntityId]
