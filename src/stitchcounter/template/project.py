# SPDX-License-Identifier: MIT

from stitchcounter.model.entity_id import generate_entity_id
from stitchcounter.model.project import Project
from stitchcounter.time import now_utc


def get_project_template() -> Project:
    return {
        "id": generate_entity_id(),
        "name": "",
        "description": None,
        "counters": [],
        "is_active": True,
        "is_expanded": True,
        "created_at": now_utc(),
    }
