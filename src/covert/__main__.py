"""Allow ``python -m covert``."""

from covert.cli import main

main()
