# SPDX-License-Identifier: MIT

import atexit

from stitchcounter.repository.configuration import CONFIGURATION_REPO
from stitchcounter.repository.id_map import ID_MAP_REPO


def flush_and_sync() -> None:
    # Projects are written by every engine call, only the caches remain
    CONFIGURATION_REPO.flush()
    ID_MAP_REPO.flush()


def register_cleanup() -> None:
    atexit.register(flush_and_sync)
