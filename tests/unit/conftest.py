"""Shared test fixtures."""

from pathlib import Path
from typing import Iterator

import pytest

from stitchcounter import configuration
from stitchcounter.repository.configuration import CONFIGURATION_REPO
from stitchcounter.repository.id_map import ID_MAP_REPO
from stitchcounter.service.engine import CounterEngine
from tests.unit.fakes import FakeStore


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def engine(store: FakeStore) -> CounterEngine:
    return CounterEngine(store)


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point config and data files at a temporary directory."""
    config_dir = tmp_path / "config"
    data_path = tmp_path / "data"
    config_dir.mkdir()
    data_path.mkdir()

    monkeypatch.setattr(configuration, "CONFIG_PATH", config_dir)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_dir / "config.yaml")
    monkeypatch.setattr(configuration, "DATA_PATH", data_path)
    monkeypatch.setattr(
        configuration, "DATA_PROJECTS_PATH", data_path / "projects.yaml"
    )
    monkeypatch.setattr(configuration, "DATA_ID_MAP_PATH", data_path / "id_map.yaml")
    monkeypatch.setattr(CONFIGURATION_REPO, "_config", None)
    ID_MAP_REPO.reset()

    yield data_path

    ID_MAP_REPO.reset()
