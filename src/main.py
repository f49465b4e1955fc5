"""Main entry point for the terminal to-do list."""
from pathlib import Path
from typing import Optional

import click

from app import create_app
from cli import CLI
from config import Settings
from logging_setup import setup_logging


@click.command()
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path), default=None,
              help='Directory holding the task storage file.')
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default=None, help='Console log level.')
@click.option('--alt-screen/--no-alt-screen', default=None,
              help='Draw in the terminal alternate screen buffer.')
def main(data_dir: Optional[Path], log_level: Optional[str], alt_screen: Optional[bool]) -> None:
    """Manage a to-do list in the terminal."""
    settings = Settings.from_env().with_overrides(
        data_dir=data_dir,
        log_level=log_level.upper() if log_level else None,
        alt_screen=alt_screen,
    )
    setup_logging(log_dir=settings.resolved_log_dir, console_level=settings.log_level)
    app = create_app(settings)
    if not app.ready:
        raise click.ClickException("Initialization failed; see the log for details.")
    CLI(app, alt_screen=settings.alt_screen).run()


if __name__ == "__main__":
    main()
