# SPDX-License-Identifier: MIT

from typing import Literal, TypedDict

from stitchcounter.model.entity_id import EntityId

EntityType = Literal[
    "projects",
    "counters",
]


type IdMapDict = dict[EntityType, IdMapMapping]


class IdMap(TypedDict):
    """
    All dictionaries are mapped in the following way:

    Synthetic id : real entity id.

    The terminal shows short synthetic ids so that a counter can be addressed
    as `7` instead of its uuid.

    Example:

    Counter with an id of "5f0c...".
    Synthetic id for that counter is 7.

    real_counter_id = id_map["counters"]["synthetic_to_real"][7] # returns "5f0c..."
    """

    projects: "IdMapMapping"
    counters: "IdMapMapping"


class IdMapMapping(TypedDict):
    synthetic_to_real: dict[int, EntityId]
    real_to_synthetic: dict[EntityId, int]
