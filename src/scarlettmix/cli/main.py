"""Main CLI entry point."""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

import click

from scarlettmix import __version__

from .commands import list_cards, probe, reset, run

logger = logging.getLogger(__name__)


def setup_logging(verbose: int, log_file: Optional[Path]) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        log_file: Also write the log to this file (optional)
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        # Rotating file handler (keeps last 5 files, max 10MB each)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_file}")


@click.group()
@click.version_option(version=__version__, prog_name="scarlettmix")
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--log-file',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Also write the log to this file'
)
@click.option(
    '--config',
    'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Configuration file (default: ~/.scarlettmix/config.json)'
)
@click.pass_context
def cli(ctx, verbose: int, log_file: Optional[Path], config_path: Optional[Path]):
    """
    Scarlett Mixer - mixer control for Focusrite Scarlett USB interfaces.

    \b
    Examples:
      # Find supported cards
      scarlettmix list

      # Show the controls of card 2 and the detected layout
      scarlettmix probe hw:2

      # Follow mixer changes, with INFO logging
      scarlettmix -v run hw:2

      # Make the card re-apply its current settings
      scarlettmix reset hw:2
    """
    setup_logging(verbose, log_file)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path


cli.add_command(run)
cli.add_command(probe)
cli.add_command(list_cards)
cli.add_command(reset)

if __name__ == "__main__":
    cli()
