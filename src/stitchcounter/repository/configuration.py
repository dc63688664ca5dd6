# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import YAMLError, dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from stitchcounter import configuration
from stitchcounter.service.error import StorageError


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        if not configuration.APP_CONFIG_PATH.is_file():
            self._config = configuration.get_default_configuration()
            return

        try:
            self._config = load(
                configuration.APP_CONFIG_PATH.read_text(), Loader=Loader
            )
        except (OSError, YAMLError) as e:
            raise StorageError(
                f"Could not read config {configuration.APP_CONFIG_PATH}: {e}"
            ) from e

        if self._config is None:
            self._config = configuration.get_default_configuration()
            return

        # Fill in fields that older config files don't have
        for key, value in configuration.get_default_configuration().items():
            if key not in self._config:
                self._config[key] = value  # type: ignore[literal-required]

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.write_text(dump(config, Dumper=Dumper))

    def flush(self) -> None:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        default_counter_min: Optional[int] = None,
        default_counter_max: Optional[int] = None,
        default_counter_step: Optional[int] = None,
        show_header: Optional[bool] = None,
        confirm_destructive: Optional[bool] = None,
        log_level: Optional[str] = None,
    ) -> None:
        self.is_dirty = True

        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if default_counter_min is not None:
            self.config["default_counter_min"] = default_counter_min
        if default_counter_max is not None:
            self.config["default_counter_max"] = default_counter_max
        if default_counter_step is not None:
            self.config["default_counter_step"] = default_counter_step
        if show_header is not None:
            self.config["show_header"] = show_header
        if confirm_destructive is not None:
            self.config["confirm_destructive"] = confirm_destructive
        if log_level is not None:
            self.config["log_level"] = log_level


CONFIGURATION_REPO = ConfigurationRepository()
