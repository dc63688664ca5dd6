# SPDX-License-Identifier: MIT

from stitchcounter.cleanup import register_cleanup
from stitchcounter.initialize import initialize
from stitchcounter.terminal.app import run


def main() -> None:
    initialize()
    register_cleanup()
    run()


if __name__ == "__main__":
    main()
