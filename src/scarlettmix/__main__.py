"""Main entry point for ``python -m scarlettmix``."""

from scarlettmix.cli import cli

if __name__ == "__main__":
    cli()
