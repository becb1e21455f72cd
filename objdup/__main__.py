"""Allow ``python -m objdup``."""

from objdup.cli import main

main()
