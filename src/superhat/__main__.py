"""Entry point for ``python -m superhat``."""

from superhat.cli.main import cli

if __name__ == "__main__":
    cli()
