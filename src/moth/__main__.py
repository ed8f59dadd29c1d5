"""Entry point for `python -m moth`."""

from moth.cli import cli

if __name__ == "__main__":
    cli()
