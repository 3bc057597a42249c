"""Allow ``python -m graphlog``."""

from graphlog.cli import cli

cli()
