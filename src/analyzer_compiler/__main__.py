"""Allow ``python -m analyzer_compiler``."""

import sys

from analyzer_compiler.cli import main


if __name__ == "__main__":
    sys.exit(main())
