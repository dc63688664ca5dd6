# SPDX-License-Identifier: MIT

import threading
from copy import deepcopy
from typing import Callable, Optional, TypeVar

from loguru import logger

from stitchcounter.model.counter import Counter, CounterLink, CounterPatch
from stitchcounter.model.entity_id import EntityId
from stitchcounter.model.project import IncrementResult, Project, ProjectPatch
from stitchcounter.repository.project import PROJECT_REPO
from stitchcounter.repository.store import ProjectStore
from stitchcounter.service import counter as counter_service
from stitchcounter.service.error import InvalidOperationError, NotFoundError
from stitchcounter.template.project import get_project_template

T = TypeVar("T")

PROJECT_PATCH_KEYS = ("name", "description", "is_active", "is_expanded")

# Data sizes are tiny, one lock for every project is enough
_ENGINE_LOCK = threading.RLock()


def find_project(
    projects: list[Project], project_id: Optional[EntityId]
) -> Optional[Project]:
    for project in projects:
        if project["id"] == project_id:
            return project
    return None


def get_project(projects: list[Project], project_id: EntityId) -> Project:
    project = find_project(projects, project_id)
    if project is None:
        raise NotFoundError("project", project_id)
    return project


def find_counter_project(projects: list[Project], counter_id: EntityId) -> Project:
    for project in projects:
        if counter_service.find_counter(project, counter_id) is not None:
            return project
    raise NotFoundError("counter", counter_id)


class CounterEngine:
    """
    Operations the presentation layer calls to change projects and counters.

    Each mutating call loads the whole collection from the store, applies the
    change in memory and saves the whole collection back. Errors are raised
    before the save, so a failed call leaves the store untouched. Every value
    returned, read or write, is a copy detached from the store.
    """

    def __init__(self, store: ProjectStore) -> None:
        self.store = store

    def __mutate(self, operation: Callable[[list[Project]], T]) -> T:
        with _ENGINE_LOCK:
            projects = self.store.load_all()
            result = operation(projects)
            self.store.save_all(projects)
            return deepcopy(result)

    def __mutate_project(
        self, project_id: EntityId, operation: Callable[[Project], T]
    ) -> T:
        def apply(projects: list[Project]) -> T:
            return operation(get_project(projects, project_id))

        return self.__mutate(apply)

    # ─────────────────────────────────────────────────────────
    # Projects
    # ─────────────────────────────────────────────────────────

    def list_projects(self) -> list[Project]:
        with _ENGINE_LOCK:
            return deepcopy(self.store.load_all())

    def get_project(self, project_id: EntityId) -> Project:
        with _ENGINE_LOCK:
            return deepcopy(get_project(self.store.load_all(), project_id))

    def create_project(self, name: str, description: Optional[str] = None) -> Project:
        project_name = counter_service.validate_project_name(name)

        def apply(projects: list[Project]) -> Project:
            project = get_project_template()
            project["name"] = project_name
            project["description"] = description
            projects.append(project)
            return project

        project = self.__mutate(apply)
        logger.debug("created project {} ({})", project["name"], project["id"])
        return project

    def update_project(self, project_id: EntityId, patch: ProjectPatch) -> Project:
        project_name: Optional[str] = None
        if "name" in patch:
            project_name = counter_service.validate_project_name(patch["name"])

        def apply(project: Project) -> Project:
            for key in PROJECT_PATCH_KEYS:
                if key in patch:
                    project[key] = patch[key]  # type: ignore[literal-required]
            if project_name is not None:
                project["name"] = project_name
            return project

        project = self.__mutate_project(project_id, apply)
        logger.debug("updated project {} with {}", project_id, sorted(patch.keys()))
        return project

    def delete_project(self, project_id: EntityId) -> Project:
        """Remove a project and all of its counters in a single write."""

        def apply(projects: list[Project]) -> Project:
            project = get_project(projects, project_id)
            projects[:] = [p for p in projects if p["id"] != project_id]
            return project

        project = self.__mutate(apply)
        logger.debug("deleted project {} ({})", project["name"], project_id)
        return project

    # ─────────────────────────────────────────────────────────
    # Counters
    # ─────────────────────────────────────────────────────────

    def create_counter(
        self,
        project_id: EntityId,
        name: str,
        min: int,
        max: int,
        step: int,
        link: Optional[CounterLink] = None,
        is_manually_disabled: bool = False,
    ) -> Counter:
        counter = self.__mutate_project(
            project_id,
            lambda project: counter_service.create_counter(
                project, name, min, max, step, link, is_manually_disabled
            ),
        )
        logger.debug("created counter {} in project {}", counter["name"], project_id)
        return counter

    def update_counter(
        self, project_id: EntityId, counter_id: EntityId, patch: CounterPatch
    ) -> Counter:
        counter = self.__mutate_project(
            project_id,
            lambda project: counter_service.update_counter(project, counter_id, patch),
        )
        logger.debug("updated counter {} with {}", counter_id, sorted(patch.keys()))
        return counter

    def delete_counter(self, project_id: EntityId, counter_id: EntityId) -> Project:
        def apply(project: Project) -> Project:
            counter_service.delete_counter(project, counter_id)
            return project

        project = self.__mutate_project(project_id, apply)
        logger.debug("deleted counter {} from project {}", counter_id, project_id)
        return project

    def increment_counter(
        self, project_id: EntityId, counter_id: EntityId
    ) -> IncrementResult:
        def apply(project: Project) -> IncrementResult:
            triggered_counter_ids = counter_service.increment_counter(
                project, counter_id
            )
            return {"project": project, "triggered_counter_ids": triggered_counter_ids}

        try:
            result = self.__mutate_project(project_id, apply)
        except InvalidOperationError as e:
            logger.info("increment rejected: {}", e.reason)
            raise
        logger.debug(
            "incremented counter {}, triggered {}",
            counter_id,
            result["triggered_counter_ids"],
        )
        return result

    def decrement_counter(self, project_id: EntityId, counter_id: EntityId) -> Project:
        def apply(project: Project) -> Project:
            counter_service.decrement_counter(project, counter_id)
            return project

        try:
            project = self.__mutate_project(project_id, apply)
        except InvalidOperationError as e:
            logger.info("decrement rejected: {}", e.reason)
            raise
        logger.debug("decremented counter {}", counter_id)
        return project

    def reset_counter(self, project_id: EntityId, counter_id: EntityId) -> Project:
        def apply(project: Project) -> Project:
            counter_service.reset_counter(project, counter_id)
            return project

        project = self.__mutate_project(project_id, apply)
        logger.debug("reset counter {} and its linked counters", counter_id)
        return project


COUNTER_ENGINE = CounterEngine(PROJECT_REPO)
