"""Campaign maintenance CLI commands."""

import asyncio

import typer

campaign_app = typer.Typer()


@campaign_app.command("list")
def list_campaigns(
    active: bool | None = typer.Option(None, "--active/--inactive", help="Filter by active flag"),
) -> None:
    """List campaigns."""
    asyncio.run(_list_campaigns(active))


async def _list_campaigns(active: bool | None) -> None:
    """Async implementation of campaign listing."""
    from fundraiser_api.core.config import get_settings
    from fundraiser_api.core.database import dispose_engine, get_session_factory, init_engine
    from fundraiser_api.services.campaign_service import list_campaigns

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            campaigns, total = await list_campaigns(session, active=active, page_size=100)
            typer.echo(f"{'Slug':<40} {'Target':<8} {'Active':<8}")
            typer.echo("-" * 58)
            for campaign in campaigns:
                typer.echo(f"{campaign.slug:<40} {campaign.campaignable_type:<8} {campaign.active!s:<8}")
            typer.echo(f"\nTotal: {total}")
    finally:
        await dispose_engine()


@campaign_app.command("destroy")
def destroy_campaign(
    slug: str = typer.Argument(..., help="Slug of the campaign to destroy"),
) -> None:
    """Destroy an inactive campaign that has no contributions."""
    asyncio.run(_destroy_campaign(slug))


async def _destroy_campaign(slug: str) -> None:
    """Async implementation of campaign destroy."""
    from fundraiser_api.core.config import get_settings
    from fundraiser_api.core.database import dispose_engine, get_session_factory, init_engine
    from fundraiser_api.lib.consistency import DestroyGuardError, RecordNotFoundError
    from fundraiser_api.services.campaign_service import destroy_campaign, get_campaign_by_slug

    settings = get_settings()
    init_engine(settings.database_url, schema=settings.database_schema)

    try:
        factory = get_session_factory()
        async with factory() as session:
            campaign = await get_campaign_by_slug(session, slug)
            await destroy_campaign(session, campaign.id)
            typer.echo(f"Campaign '{slug}' destroyed")
    except RecordNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
    except DestroyGuardError as e:
        typer.echo(f"Refused: {', '.join(c.value for c in e.codes)}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        await dispose_engine()
