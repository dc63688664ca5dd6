# SPDX-License-Identifier: MIT

from stitchcounter.model.id_map import IdMap


def get_id_map_template() -> IdMap:
    return {
        "projects": {"synthetic_to_real": {}, "real_to_synthetic": {}},
        "counters": {"synthetic_to_real": {}, "real_to_synthetic": {}},
    }
