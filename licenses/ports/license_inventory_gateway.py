"""
License inventory gateway port (interface).

This defines the contract of the external inventory API, which is the
system of record for license rows and purchased totals.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Dict, List

from core.domain.value_objects import ActingUser
from licenses.domain.license import License, LicenseFields


class LicenseInventoryGateway(ABC):
    """
    Abstract gateway to the external license inventory API.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Every method raises RemoteInventoryError when the call fails.
    """

    @abstractmethod
    async def get_licenses(self, user: ActingUser) -> List[License]:
        """
        List the licenses visible to a user.

        Args:
            user: Acting user; the API may restrict scope by role

        Returns:
            List of License entities
        """
        pass

    @abstractmethod
    async def add_license(self, fields: LicenseFields, user: ActingUser) -> License:
        """
        Create a license.

        The API decides the initial approval status from the user's role.

        Args:
            fields: Editable license attributes
            user: Acting user

        Returns:
            Created License entity
        """
        pass

    @abstractmethod
    async def update_license(
        self, license_id: int, fields: LicenseFields, acting_username: str
    ) -> License:
        """
        Replace every editable field of a license.

        Args:
            license_id: License id
            fields: New editable attributes
            acting_username: Who performs the change

        Returns:
            Updated License entity
        """
        pass

    @abstractmethod
    async def delete_license(self, license_id: int, acting_username: str) -> None:
        """
        Delete a license permanently.

        Args:
            license_id: License id
            acting_username: Who performs the change
        """
        pass

    @abstractmethod
    async def get_license_totals(self) -> Dict[str, int]:
        """
        Fetch the purchased totals.

        Returns:
            Mapping of product name to purchased total
        """
        pass

    @abstractmethod
    async def save_license_totals(self, totals: Dict[str, int], acting_username: str) -> None:
        """
        Replace the whole purchased-totals mapping.

        Args:
            totals: New mapping of product name to purchased total
            acting_username: Who performs the change
        """
        pass

    @abstractmethod
    async def rename_product(self, old_name: str, new_name: str, acting_username: str) -> None:
        """
        Rename a product on every stored license.

        Args:
            old_name: Current product name
            new_name: New product name
            acting_username: Who performs the change
        """
        pass
