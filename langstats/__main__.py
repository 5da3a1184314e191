"""Allow ``python -m langstats``."""

import sys

from .cli import main

main(sys.argv[1:])
