# SPDX-License-Identifier: MIT

import os
import tempfile
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

from loguru import logger
from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from stitchcounter import configuration, time
from stitchcounter.model.counter import Counter
from stitchcounter.model.project import Project
from stitchcounter.service.error import StorageError

PROJECT_DEFAULTS: dict[str, Any] = {
    "description": None,
    "is_active": True,
    "is_expanded": True,
}

COUNTER_DEFAULTS: dict[str, Any] = {
    "linked_to_counter_id": None,
    "trigger_value": None,
    "is_manually_disabled": False,
}


class ProjectRepository:
    """
    Stores the whole project collection in a single YAML document.

    Every call reads or writes the full collection. Writes go to a temporary
    file in the same directory that then replaces the target, so a failed
    write leaves the previous contents in place.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return configuration.DATA_PROJECTS_PATH

    def load_all(self) -> list[Project]:
        if not self.path.is_file():
            logger.debug("no project data at {}, starting empty", self.path)
            return []

        try:
            raw_data = load(self.path.read_text(), Loader=Loader)
        except (OSError, YAMLError) as e:
            logger.error("failed to read {}: {}", self.path, e)
            raise StorageError(f"Could not read projects from {self.path}: {e}") from e

        if raw_data is None:
            return []
        if not isinstance(raw_data, dict) or not isinstance(
            raw_data.get("projects"), list
        ):
            raise StorageError(f"Malformed project data in {self.path}")

        projects = [
            self.__convert_project_for_deserialization(raw_project)
            for raw_project in raw_data["projects"]
        ]
        logger.debug("loaded {} project(s) from {}", len(projects), self.path)
        return projects

    def save_all(self, projects: list[Project]) -> None:
        try:
            serializable_projects = [
                self.__convert_project_for_serialization(deepcopy(project))
                for project in projects
            ]
            contents = dump({"projects": serializable_projects}, Dumper=Dumper)
        except (YAMLError, TypeError, AttributeError) as e:
            raise StorageError(f"Could not serialize projects: {e}") from e

        self.path.parent.mkdir(parents=True, exist_ok=True)
        file_descriptor, temp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=".projects-", suffix=".yaml.tmp"
        )
        try:
            with os.fdopen(file_descriptor, "w") as temp_file:
                temp_file.write(contents)
            os.replace(temp_name, self.path)
        except OSError as e:
            logger.error("failed to write {}: {}", self.path, e)
            Path(temp_name).unlink(missing_ok=True)
            raise StorageError(f"Could not write projects to {self.path}: {e}") from e

        logger.debug("saved {} project(s) to {}", len(projects), self.path)

    def __convert_project_for_serialization(self, project: Project) -> dict[str, Any]:
        serializable_project = cast(dict[str, Any], project)
        serializable_project["created_at"] = time.datetime_to_iso_str(
            serializable_project["created_at"]
        )
        return serializable_project

    def __convert_project_for_deserialization(self, raw_project: Any) -> Project:
        if not isinstance(raw_project, dict):
            raise StorageError(f"Malformed project record in {self.path}")

        deserializable_project = raw_project
        for key in ("id", "name", "created_at"):
            if key not in deserializable_project:
                raise StorageError(f"Project record in {self.path} is missing '{key}'")

        # Records written by older versions lack these fields
        for key, value in PROJECT_DEFAULTS.items():
            deserializable_project.setdefault(key, value)

        try:
            deserializable_project["created_at"] = time.datetime_from_str(
                str(deserializable_project["created_at"])
            )
        except (ValueError, TypeError) as e:
            raise StorageError(f"Malformed project record in {self.path}: {e}") from e

        deserializable_project["counters"] = [
            self.__convert_counter_for_deserialization(raw_counter)
            for raw_counter in deserializable_project.get("counters") or []
        ]
        return cast(Project, deserializable_project)

    def __convert_counter_for_deserialization(self, raw_counter: Any) -> Counter:
        if not isinstance(raw_counter, dict):
            raise StorageError(f"Malformed counter record in {self.path}")

        deserializable_counter = raw_counter
        for key, value in COUNTER_DEFAULTS.items():
            if deserializable_counter.get(key) is None:
                deserializable_counter[key] = value
        for key in ("id", "name", "value", "min", "max", "step"):
            if key not in deserializable_counter:
                raise StorageError(
                    f"Counter record in {self.path} is missing '{key}'"
                )
        return cast(Counter, deserializable_counter)


PROJECT_REPO = ProjectRepository()
