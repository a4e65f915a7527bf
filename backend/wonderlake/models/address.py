"""Searched address analytics model."""
import uuid
from datetime import datetime
from sqlalchemy import DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from wonderlake.database import Base


class SearchedAddress(Base):
    """One terminal outcome of an address check, kept for analytics only."""

    __tablename__ = "searched_addresses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    # resident, annexation, other_municipality, outside_area, not_found
    result: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    municipality_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # Stored as text, exactly as the geocoder reported them
    latitude: Mapped[str | None] = mapped_column(String(32), nullable=True)
    longitude: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
