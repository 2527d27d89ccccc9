"""Service catalog with base durations and increment pricing."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from massage_booking.config import settings
from massage_booking.exceptions import ServiceNotFoundError
from massage_booking.schemas.service_schema import ServiceTier
from massage_booking.tools.pricing import offered_durations

logger = logging.getLogger(__name__)

DEFAULT_TIERS: tuple[ServiceTier, ...] = (
    ServiceTier(id=1, name="Stressbuster", base_duration_minutes=60,
                base_price=Decimal("80.00"), increment_minutes=30,
                increment_price=Decimal("40.00")),
    ServiceTier(id=2, name="Sports Massage", base_duration_minutes=60,
                base_price=Decimal("90.00"), increment_minutes=30,
                increment_price=Decimal("45.00")),
    ServiceTier(id=3, name="Deep Tissue", base_duration_minutes=60,
                base_price=Decimal("100.00"), increment_minutes=30,
                increment_price=Decimal("50.00")),
    ServiceTier(id=4, name="Swedish Relaxation", base_duration_minutes=60,
                base_price=Decimal("85.00"), increment_minutes=30,
                increment_price=Decimal("42.00")),
    ServiceTier(id=5, name="Prenatal", base_duration_minutes=60,
                base_price=Decimal("95.00"), increment_minutes=30,
                increment_price=Decimal("47.00")),
)


class ServiceCatalog:
    """
    Read-only set of service tiers keyed by id.

    Tiers are immutable; replacing the catalog never touches prices already
    snapshotted onto existing booking requests.
    """

    def __init__(self, tiers: Iterable[ServiceTier] = DEFAULT_TIERS) -> None:
        self._tiers: dict[int, ServiceTier] = {}
        for tier in tiers:
            if tier.id in self._tiers:
                raise ValueError(f"Duplicate service id in catalog: {tier.id}")
            self._tiers[tier.id] = tier

    def get(self, service_id: int) -> Optional[ServiceTier]:
        """Return the tier with this id, or None if unknown."""
        return self._tiers.get(service_id)

    def require(self, service_id: int) -> ServiceTier:
        """Return an active tier or raise ServiceNotFoundError."""
        tier = self._tiers.get(service_id)
        if tier is None or not tier.active:
            raise ServiceNotFoundError(service_id)
        return tier

    def all_active(self) -> list[ServiceTier]:
        return [t for t in self._tiers.values() if t.active]

    def menu(self, choices: Optional[Iterable[int]] = None) -> list[dict]:
        """Return all active tiers with the durations the booking form offers."""
        if choices is None:
            choices = settings.booking.offered_durations
        choices = tuple(choices)
        return [
            {
                "id": tier.id,
                "name": tier.name,
                "base_price": tier.base_price,
                "durations": offered_durations(tier, choices),
            }
            for tier in self.all_active()
        ]
