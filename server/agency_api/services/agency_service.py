"""Agency settings service."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from ..models.agency import AgencySettings
from ..schemas.agency import UpdateAgencySettingsRequest

logger = logging.getLogger(__name__)


class AgencyService:
    """Reads and edits the single agency settings row."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_settings(self) -> AgencySettings:
        """Return the settings row, creating it from configured defaults on first use."""
        result = await self.db.execute(select(AgencySettings).limit(1))
        row = result.scalar_one_or_none()
        if row is not None:
            return row

        row = AgencySettings(
            advance_payment_amount=settings.default_advance_payment,
            payment_mode="test",
            currency=settings.currency,
        )
        self.db.add(row)
        await self.db.flush()
        logger.info(
            "Created default agency settings",
            extra={"advance_payment_amount": row.advance_payment_amount}
        )
        return row

    async def update_settings(self, request: UpdateAgencySettingsRequest) -> AgencySettings:
        row = await self.get_settings()
        changes = request.model_dump(exclude_none=True)
        for field, value in changes.items():
            setattr(row, field, value)
        await self.db.commit()

        logger.info("Agency settings updated", extra={"fields": sorted(changes)})
        return row
