"""School import service -- loads the state / district / school hierarchy from CSV."""

from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.school_import import parse_schools_csv
from fundraiser_api.models.district import District
from fundraiser_api.models.school import School
from fundraiser_api.models.state import State


@dataclass
class ImportSummary:
    """Counts of records created by an import run."""

    rows: int = 0
    states_created: int = 0
    districts_created: int = 0
    schools_created: int = 0


async def import_schools(session: AsyncSession, file_path: Path) -> ImportSummary:
    """Import states, districts and schools from a CSV file.

    Existing records are matched by name (states ignoring case, districts
    within their state, schools within their district) and reused; only the
    missing ones are inserted.  The whole file is committed in one transaction.

    Args:
        session: Database session.
        file_path: Path to the school hierarchy CSV file.

    Returns:
        Summary of what was created.

    Raises:
        ValueError: If the CSV is missing expected columns.
    """
    records = parse_schools_csv(file_path)
    logger.info(f"Importing {len(records)} school rows")

    summary = ImportSummary(rows=len(records))
    states: dict[str, State] = {}
    districts: dict[tuple[str, str], District] = {}

    for rec in records:
        state_key = rec.state_name.lower()
        state = states.get(state_key)
        if state is None:
            state = (
                await session.execute(select(State).where(func.lower(State.name) == state_key))
            ).scalar_one_or_none()
            if state is None:
                state = State(name=rec.state_name, abbr=rec.state_abbr)
                session.add(state)
                await session.flush()
                summary.states_created += 1
            states[state_key] = state

        district_key = (state_key, rec.district_name)
        district = districts.get(district_key)
        if district is None:
            district = (
                await session.execute(
                    select(District).where(District.state_id == state.id, District.name == rec.district_name)
                )
            ).scalar_one_or_none()
            if district is None:
                district = District(name=rec.district_name, state_id=state.id)
                session.add(district)
                await session.flush()
                summary.districts_created += 1
            districts[district_key] = district

        school = (
            await session.execute(
                select(School.id).where(School.district_id == district.id, School.name == rec.school_name)
            )
        ).scalar_one_or_none()
        if school is None:
            session.add(School(name=rec.school_name, district_id=district.id))
            await session.flush()
            summary.schools_created += 1

    await session.commit()
    logger.info(
        f"School import finished: {summary.states_created} states, "
        f"{summary.districts_created} districts, {summary.schools_created} schools created"
    )
    return summary
