"""Import CLI commands for the school hierarchy."""

import asyncio
from pathlib import Path

import typer

import_app = typer.Typer()


@import_app.command("schools")
def import_schools(
    file: Path = typer.Argument(..., help="Path to school hierarchy CSV", exists=True),  # noqa: B008
) -> None:
    """Import states, districts and schools from a CSV file."""
    asyncio.run(_import_schools(file))


async def _import_schools(file_path: Path) -> None:
    """Async implementation of school import."""
    from fundraiser_api.core.config import get_settings
    from fundraiser_api.core.database import dispose_engine, get_session_factory, init_engine
    from fundraiser_api.services.school_import_service import import_schools

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            typer.echo(f"Processing {file_path}...")
            summary = await import_schools(session, file_path)
            typer.echo("\nImport completed:")
            typer.echo(f"  Rows:              {summary.rows}")
            typer.echo(f"  States created:    {summary.states_created}")
            typer.echo(f"  Districts created: {summary.districts_created}")
            typer.echo(f"  Schools created:   {summary.schools_created}")
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()
