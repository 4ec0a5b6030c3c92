"""
GetLicenseInventoryHandler.

Handler for the grouped inventory screen.
"""
from datetime import date
from typing import Optional

from licenses.application.dto.license_dto import InventoryViewDTO
from licenses.application.queries.get_license_inventory import GetLicenseInventoryQuery
from licenses.application.services.inventory_loader import InventoryLoader
from licenses.application.services.inventory_presenter import InventoryPresenter
from licenses.domain.inventory import derive_inventory
from licenses.ports.license_inventory_gateway import LicenseInventoryGateway


class GetLicenseInventoryHandler:
    """Handler for GetLicenseInventoryQuery."""

    def __init__(self, gateway: LicenseInventoryGateway, today: Optional[date] = None):
        """Initialize handler with the inventory gateway."""
        self.gateway = gateway
        self.loader = InventoryLoader(gateway)
        self.today = today

    async def handle(self, query: GetLicenseInventoryQuery) -> InventoryViewDTO:
        """
        Handle get license inventory query.

        Args:
            query: GetLicenseInventoryQuery

        Returns:
            InventoryViewDTO

        Raises:
            RemoteInventoryError: If licenses or totals cannot be fetched
        """
        snapshot = await self.loader.load(query.acting_user)
        view = derive_inventory(
            snapshot.licenses,
            snapshot.totals,
            search=query.search,
            product=query.product,
        )
        return InventoryPresenter(self.today).inventory(view, query.acting_user)
