# SPDX-License-Identifier: MIT

from stitchcounter.configuration import DEFAULT_COUNTER_MAX
from stitchcounter.model.counter import Counter
from stitchcounter.model.entity_id import generate_entity_id


def get_counter_template() -> Counter:
    return {
        "id": generate_entity_id(),
        "name": "",
        "value": 0,
        "min": 0,
        "max": DEFAULT_COUNTER_MAX,
        "step": 1,
        "linked_to_counter_id": None,
        "trigger_value": None,
        "is_manually_disabled": False,
    }
