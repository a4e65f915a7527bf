"""Searched-address analytics persistence."""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from wonderlake.models.address import SearchedAddress
from wonderlake.services.address_check import Recorder, SearchRecord

logger = logging.getLogger("wonderlake.analytics")


async def save_searched_address(db: AsyncSession, record: SearchRecord) -> SearchedAddress:
    row = SearchedAddress(
        address=record.address[:500],
        result=record.result.value,
        municipality_name=record.municipality_name,
        latitude=record.latitude,
        longitude=record.longitude,
    )
    db.add(row)
    await db.flush()
    return row


def session_recorder(db: AsyncSession) -> Recorder:
    """Recorder bound to a request session.

    A failed write is rolled back so the rest of the request is unaffected.
    """

    async def record(search: SearchRecord) -> None:
        try:
            await save_searched_address(db, search)
        except Exception:
            await db.rollback()
            raise

    return record
