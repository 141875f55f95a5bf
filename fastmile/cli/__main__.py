"""Main module."""

from fastmile.cli.main import cli

if __name__ == "__main__":
    cli()
