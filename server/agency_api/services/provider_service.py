"""Provider (add-on service) operations."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..domain.pricing import ExtraLine
from ..models.provider import Provider
from ..schemas.booking import ExtraServiceRequest
from ..schemas.provider import CreateProviderRequest

logger = logging.getLogger(__name__)


class ProviderService:
    """Service for providers and the extras sold from them."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_provider(self, request: CreateProviderRequest) -> Provider:
        provider = Provider(**request.model_dump())
        self.db.add(provider)
        await self.db.commit()

        logger.info(
            "Provider created",
            extra={"provider_id": str(provider.id), "service_type": provider.service_type}
        )
        return provider

    async def list_providers(self, active_only: bool = True) -> list[Provider]:
        stmt = select(Provider).order_by(Provider.service_type, Provider.name)
        if active_only:
            stmt = stmt.where(Provider.is_active.is_(True))
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def price_extras(
        self, requested: list[ExtraServiceRequest]
    ) -> tuple[list[dict], list[ExtraLine]]:
        """
        Snapshot the current selling price of each requested extra.

        Returns the JSON lines stored on the client and the pricing lines.

        Raises:
            NotFoundError: If a provider does not exist
            ValidationError: If a provider is inactive
        """
        if not requested:
            return [], []

        ids = [item.provider_id for item in requested]
        result = await self.db.execute(select(Provider).where(Provider.id.in_(ids)))
        providers = {p.id: p for p in result.scalars()}

        snapshots, lines = [], []
        for item in requested:
            provider = providers.get(item.provider_id)
            if provider is None:
                raise NotFoundError(resource_type="provider", resource_id=str(item.provider_id))
            if not provider.is_active:
                raise ValidationError(
                    detail=f"Service '{provider.name}' is no longer offered",
                    errors={"provider_id": str(provider.id)}
                )
            line = ExtraLine(unit_price=provider.selling_price_per_unit, quantity=item.quantity)
            lines.append(line)
            snapshots.append({
                "provider_id": str(provider.id),
                "name": provider.name,
                "service_type": provider.service_type,
                "quantity": item.quantity,
                "selling_price_per_unit_snapshot": provider.selling_price_per_unit,
                "subtotal": line.subtotal,
            })
        return snapshots, lines
