"""Database migration CLI commands using Alembic programmatically."""

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from loguru import logger

if TYPE_CHECKING:
    from alembic.config import Config

db_app = typer.Typer()

_DEFAULT_INI = Path("alembic.ini")


def _alembic_config(ini_path: Path) -> "Config":
    """Load the Alembic config, failing with a readable message if it is missing."""
    from alembic.config import Config

    if not ini_path.exists():
        typer.echo(f"Error: Alembic config not found: {ini_path}", err=True)
        raise typer.Exit(code=1)
    return Config(str(ini_path))


@db_app.command()
def upgrade(
    revision: str = typer.Argument("head", help="Target revision"),
    config: Path = typer.Option(_DEFAULT_INI, "--config", help="Path to alembic.ini"),  # noqa: B008
) -> None:
    """Run database migrations up to the target revision."""
    from alembic import command

    alembic_config = _alembic_config(config)
    logger.info(f"Upgrading database to {revision}")
    command.upgrade(alembic_config, revision)
    logger.info("Database upgrade complete")


@db_app.command()
def downgrade(
    revision: str = typer.Argument("-1", help="Target revision"),
    config: Path = typer.Option(_DEFAULT_INI, "--config", help="Path to alembic.ini"),  # noqa: B008
) -> None:
    """Roll the database back to the target revision."""
    from alembic import command

    alembic_config = _alembic_config(config)
    logger.info(f"Downgrading database to {revision}")
    command.downgrade(alembic_config, revision)
    logger.info("Database downgrade complete")


@db_app.command()
def current(
    config: Path = typer.Option(_DEFAULT_INI, "--config", help="Path to alembic.ini"),  # noqa: B008
) -> None:
    """Show the current database migration revision."""
    from alembic import command

    command.current(_alembic_config(config), verbose=True)
