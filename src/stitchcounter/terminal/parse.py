# SPDX-License-Identifier: MIT

import typer

from stitchcounter.model.entity_id import EntityId
from stitchcounter.repository.id_map import ID_MAP_REPO
from stitchcounter.service.engine import COUNTER_ENGINE, find_counter_project


def parse_id_list(id_param: str) -> list[int]:
    """
    Parse a single ID, comma-separated list of IDs, or ranges of IDs.

    Args:
        id_param: A single ID (e.g., "1"), comma-separated list (e.g., "1,2,3"),
                  range (e.g., "1-5"), or mixed (e.g., "1,3-5,8")

    Returns:
        List of integer IDs (sorted and deduplicated)

    Raises:
        typer.BadParameter: If any ID is not a valid integer or range format is invalid
    """
    id_strings = [s.strip() for s in id_param.split(",")]

    ids: list[int] = []
    for id_str in id_strings:
        if not id_str:
            continue

        if "-" in id_str:
            range_parts = id_str.split("-")
            if len(range_parts) != 2:
                raise typer.BadParameter(
                    f"Invalid range format: '{id_str}' (expected format: 'start-end')"
                )

            try:
                start = int(range_parts[0].strip())
                end = int(range_parts[1].strip())
            except ValueError:
                raise typer.BadParameter(
                    f"Invalid range: '{id_str}' contains non-integer values"
                )

            if start > end:
                raise typer.BadParameter(
                    f"Invalid range: '{id_str}' (start must be <= end)"
                )

            ids.extend(range(start, end + 1))
        else:
            try:
                ids.append(int(id_str))
            except ValueError:
                raise typer.BadParameter(
                    f"Invalid ID: '{id_str}' is not a valid integer"
                )

    if len(ids) == 0:
        raise typer.BadParameter("No valid IDs provided")

    return sorted(set(ids))


def resolve_project_id(synthetic_id: int) -> EntityId:
    return ID_MAP_REPO.get_real_id("projects", synthetic_id)


def resolve_counter_id(synthetic_id: int) -> tuple[EntityId, EntityId]:
    """
    Map a displayed counter id to (project id, counter id).

    Counters are addressed on their own in the terminal, so the owning
    project is looked up from the stored collection.
    """
    counter_id = ID_MAP_REPO.get_real_id("counters", synthetic_id)
    project = find_counter_project(COUNTER_ENGINE.list_projects(), counter_id)
    return project["id"], counter_id
