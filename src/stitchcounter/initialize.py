# SPDX-License-Identifier: MIT

from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from stitchcounter import configuration
from stitchcounter.model.id_map import IdMap
from stitchcounter.template.id_map import get_id_map_template


def initialize() -> None:
    configuration.CONFIG_PATH.mkdir(parents=True, exist_ok=True)
    configuration.load_data_path_configuration()
    configuration.DATA_PATH.mkdir(parents=True, exist_ok=True)

    __ensure_config_files()
    __ensure_data_files()


def __ensure_config_files() -> None:
    if not configuration.APP_CONFIG_PATH.is_file():
        config = configuration.get_default_configuration()
        configuration.APP_CONFIG_PATH.write_text(dump(config, Dumper=Dumper))


def __ensure_data_files() -> None:
    if not configuration.DATA_PROJECTS_PATH.is_file():
        configuration.DATA_PROJECTS_PATH.write_text(
            dump({"projects": []}, Dumper=Dumper)
        )
    if not configuration.DATA_ID_MAP_PATH.is_file():
        id_map: IdMap = get_id_map_template()
        configuration.DATA_ID_MAP_PATH.write_text(dump(id_map, Dumper=Dumper))
