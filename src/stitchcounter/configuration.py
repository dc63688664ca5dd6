# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import NotRequired, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "stitchcounter"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# These will be set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_PROJECTS_PATH: Path = DATA_PATH / "projects.yaml"
DATA_ID_MAP_PATH: Path = DATA_PATH / "id_map.yaml"

# Open-ended counters use this ceiling
DEFAULT_COUNTER_MAX = 999999


class Configuration(TypedDict):
    data_path: Optional[str]
    default_counter_min: int
    default_counter_max: int
    default_counter_step: int
    show_header: bool
    confirm_destructive: NotRequired[bool]
    log_level: NotRequired[str]


def get_default_configuration() -> Configuration:
    return {
        "data_path": None,
        "default_counter_min": 0,
        "default_counter_max": DEFAULT_COUNTER_MAX,
        "default_counter_step": 1,
        "show_header": True,
        "confirm_destructive": True,
        "log_level": "WARNING",
    }


def set_data_path(data_path: Path) -> None:
    global DATA_PATH, DATA_PROJECTS_PATH, DATA_ID_MAP_PATH

    DATA_PATH = data_path
    DATA_PROJECTS_PATH = DATA_PATH / "projects.yaml"
    DATA_ID_MAP_PATH = DATA_PATH / "id_map.yaml"


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repository touches the data directory.
    """
    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return

    data_path_setting = config.get("data_path")
    if data_path_setting is not None:
        set_data_path(Path(data_path_setting))
