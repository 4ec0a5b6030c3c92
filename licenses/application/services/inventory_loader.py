"""
Inventory loading.

Fetches the license list and the purchased totals concurrently and keeps
them together as one snapshot.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple

from core.domain.value_objects import ActingUser
from licenses.domain.license import License
from licenses.ports.license_inventory_gateway import LicenseInventoryGateway
from products.domain.registry import ProductRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventorySnapshot:
    """Licenses and totals as returned by one reload."""

    licenses: Tuple[License, ...] = ()
    totals: Dict[str, int] = field(default_factory=dict)

    @property
    def registry(self) -> ProductRegistry:
        return ProductRegistry.derive(self.licenses, self.totals)

    def count_licenses_for(self, product: str) -> int:
        return sum(1 for license in self.licenses if license.product == product)


class InventoryLoader:
    """Loads inventory snapshots from the gateway."""

    def __init__(self, gateway: LicenseInventoryGateway):
        """Initialize loader with the inventory gateway."""
        self.gateway = gateway

    async def load(self, user: ActingUser) -> InventorySnapshot:
        """
        Fetch licenses and totals.

        Both reads are issued concurrently; the snapshot is built only
        when both have completed.

        Args:
            user: Acting user, which scopes the license list

        Returns:
            InventorySnapshot

        Raises:
            RemoteInventoryError: If either read fails
        """
        licenses, totals = await asyncio.gather(
            self.gateway.get_licenses(user),
            self.gateway.get_license_totals(),
        )
        logger.debug(
            "Loaded %d license(s) and %d total(s) for %s",
            len(licenses),
            len(totals),
            user.username,
        )
        return InventorySnapshot(licenses=tuple(licenses), totals=dict(totals))
