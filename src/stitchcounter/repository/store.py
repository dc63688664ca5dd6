# SPDX-License-Identifier: MIT

"""Persistence contract consumed by the counter engine."""

from typing import Protocol, runtime_checkable

from stitchcounter.model.project import Project


@runtime_checkable
class ProjectStore(Protocol):
    """Protocol for stores holding the whole project collection."""

    def load_all(self) -> list[Project]:
        """Return the full project collection, with defaults applied."""
        ...

    def save_all(self, projects: list[Project]) -> None:
        """Replace the persisted collection with `projects`, all or nothing."""
        ...
