"""Allow ``python -m timeliner``."""

from timeliner.cli import run

run()
