"""
Product registry handlers.

Handlers for the product-management commands. Validation runs against
the freshly loaded registry before any mutating call is issued; product
management is reserved to administrators.
"""
import logging
from typing import Dict

from core.domain.exceptions import (
    ConfirmationRequiredError,
    DuplicateProductNameError,
    ProductManagementForbiddenError,
    ProductRenameIncompleteError,
    RemoteInventoryError,
)
from core.domain.value_objects import ActingUser
from licenses.application.dto.license_dto import InventoryMutationResultDTO
from licenses.application.handlers.license_handlers import InventoryMutationHandler
from licenses.application.services.inventory_loader import InventoryLoader
from products.application.commands.add_product import AddProductCommand
from products.application.commands.remove_product import RemoveProductCommand
from products.application.commands.rename_product import RenameProductCommand
from products.application.commands.save_license_totals import SaveLicenseTotalsCommand
from products.application.commands.set_product_total import SetProductTotalCommand
from products.application.dto.product_dto import ProductEntryDTO, ProductRegistryDTO
from products.application.queries.get_product_registry import GetProductRegistryQuery
from products.domain.events import (
    LicenseTotalsSaved,
    ProductAdded,
    ProductRemoved,
    ProductRenamed,
)
from products.domain.registry import normalize_product_name, parse_license_total

logger = logging.getLogger(__name__)


class ProductManagementHandler(InventoryMutationHandler):
    """Shared plumbing of product-management handlers."""

    @staticmethod
    def require_admin(user: ActingUser) -> None:
        """
        Raises:
            ProductManagementForbiddenError: If the user is not an administrator
        """
        if not user.is_admin:
            logger.warning("Product management denied for %s", user.username)
            raise ProductManagementForbiddenError()

    async def save_totals(self, totals: Dict[str, int], user: ActingUser) -> None:
        """Persist the totals mapping and announce it."""
        try:
            await self.gateway.save_license_totals(totals, user.username)
        except RemoteInventoryError:
            logger.error("Failed to save license totals", extra={"actor": user.username})
            raise
        await self.event_bus.publish(
            LicenseTotalsSaved(aggregate_id="license-totals", actor=user.username, totals=totals)
        )


class AddProductHandler(ProductManagementHandler):
    """Handler for AddProductCommand."""

    async def handle(self, command: AddProductCommand) -> InventoryMutationResultDTO:
        """
        Handle add product command.

        Args:
            command: AddProductCommand

        Returns:
            InventoryMutationResultDTO

        Raises:
            ProductManagementForbiddenError: If the user is not an administrator
            InvalidProductNameError: If the name is empty
            DuplicateProductNameError: If the name exists ignoring case
            RemoteInventoryError: If the API call fails
        """
        user = command.acting_user
        self.require_admin(user)
        name = normalize_product_name(command.name)

        snapshot = await InventoryLoader(self.gateway).load(user)
        registry = snapshot.registry.add(name)

        await self.save_totals(dict(registry.totals), user)
        await self.event_bus.publish(ProductAdded(aggregate_id=name, actor=user.username, product=name))
        logger.info("Product %s added", name, extra={"actor": user.username})

        return await self.result(user, f"Product '{name}' added")


class RenameProductHandler(ProductManagementHandler):
    """Handler for RenameProductCommand."""

    async def handle(self, command: RenameProductCommand) -> InventoryMutationResultDTO:
        """
        Handle rename product command.

        Licenses are renamed through the API first; the purchased total,
        when one is recorded, is then moved to the new key.

        Args:
            command: RenameProductCommand

        Returns:
            InventoryMutationResultDTO

        Raises:
            ProductManagementForbiddenError: If the user is not an administrator
            ProductNotFoundError: If the product is not registered
            InvalidProductNameError: If the new name is empty
            DuplicateProductNameError: If another product uses the new name
            RemoteInventoryError: If renaming the licenses fails
            ProductRenameIncompleteError: If licenses were renamed but the
                total could not be moved
        """
        user = command.acting_user
        self.require_admin(user)
        old_name = command.old_name
        new_name = normalize_product_name(command.new_name)

        snapshot = await InventoryLoader(self.gateway).load(user)
        current = snapshot.registry
        renamed = current.rename(old_name, new_name)
        if renamed is current:
            return InventoryMutationResultDTO(
                message="Product name unchanged",
                inventory=await self.reload(user),
            )

        try:
            await self.gateway.rename_product(old_name, new_name, user.username)
        except RemoteInventoryError:
            logger.error(
                "Failed to rename product %s to %s", old_name, new_name,
                extra={"actor": user.username},
            )
            raise

        if old_name in snapshot.totals:
            try:
                await self.save_totals(dict(renamed.totals), user)
            except RemoteInventoryError as e:
                raise ProductRenameIncompleteError(old_name, new_name, e.detail) from e

        await self.event_bus.publish(
            ProductRenamed(
                aggregate_id=new_name,
                actor=user.username,
                old_name=old_name,
                new_name=new_name,
            )
        )
        logger.info("Product %s renamed to %s", old_name, new_name, extra={"actor": user.username})

        return await self.result(user, f"Product '{old_name}' renamed to '{new_name}'")


class RemoveProductHandler(ProductManagementHandler):
    """Handler for RemoveProductCommand."""

    async def handle(self, command: RemoveProductCommand) -> InventoryMutationResultDTO:
        """
        Handle remove product command.

        Only the registry entry and its purchased total are dropped;
        licenses referencing the product are kept.

        Args:
            command: RemoveProductCommand

        Returns:
            InventoryMutationResultDTO

        Raises:
            ConfirmationRequiredError: If the removal was not confirmed
            ProductManagementForbiddenError: If the user is not an administrator
            ProductNotFoundError: If the product is not registered
            RemoteInventoryError: If the API call fails
        """
        if not command.confirmed:
            raise ConfirmationRequiredError("Removing a product must be confirmed")
        user = command.acting_user
        self.require_admin(user)

        snapshot = await InventoryLoader(self.gateway).load(user)
        registry = snapshot.registry.remove(command.name)
        if command.name in snapshot.totals:
            await self.save_totals(dict(registry.totals), user)

        still_referencing = snapshot.count_licenses_for(command.name)
        await self.event_bus.publish(
            ProductRemoved(
                aggregate_id=command.name,
                actor=user.username,
                product=command.name,
                licenses_still_referencing=still_referencing,
            )
        )

        message = f"Product '{command.name}' removed"
        if still_referencing:
            message = (
                f"{message}; {still_referencing} license(s) still reference it and "
                f"remain listed"
            )
        return await self.result(user, message)


class SetProductTotalHandler(ProductManagementHandler):
    """Handler for SetProductTotalCommand."""

    async def handle(self, command: SetProductTotalCommand) -> InventoryMutationResultDTO:
        """
        Handle set product total command.

        Args:
            command: SetProductTotalCommand

        Returns:
            InventoryMutationResultDTO

        Raises:
            ProductManagementForbiddenError: If the user is not an administrator
            InvalidLicenseTotalError: If the total is not a non-negative integer
            ProductNotFoundError: If the product is not registered
            RemoteInventoryError: If the API call fails
        """
        user = command.acting_user
        self.require_admin(user)
        total = parse_license_total(command.total)

        snapshot = await InventoryLoader(self.gateway).load(user)
        registry = snapshot.registry.set_total(command.name, total)
        await self.save_totals(dict(registry.totals), user)

        return await self.result(user, f"Purchased total of '{command.name}' set to {total}")


class SaveLicenseTotalsHandler(ProductManagementHandler):
    """Handler for SaveLicenseTotalsCommand."""

    async def handle(self, command: SaveLicenseTotalsCommand) -> InventoryMutationResultDTO:
        """
        Handle save license totals command.

        Every entry is validated before anything is sent; one invalid
        entry rejects the whole save.

        Args:
            command: SaveLicenseTotalsCommand

        Returns:
            InventoryMutationResultDTO

        Raises:
            ProductManagementForbiddenError: If the user is not an administrator
            InvalidProductNameError: If a name is empty
            DuplicateProductNameError: If two names differ only in case
            InvalidLicenseTotalError: If a total is not a non-negative integer
            RemoteInventoryError: If the API call fails
        """
        user = command.acting_user
        self.require_admin(user)

        totals: Dict[str, int] = {}
        seen: Dict[str, str] = {}
        for raw_name, raw_total in command.totals.items():
            name = normalize_product_name(raw_name)
            if name.casefold() in seen:
                raise DuplicateProductNameError(name)
            seen[name.casefold()] = name
            totals[name] = parse_license_total(raw_total)

        await self.save_totals(totals, user)
        logger.info("Saved %d license total(s)", len(totals), extra={"actor": user.username})

        return await self.result(user, "License totals saved")


class GetProductRegistryHandler:
    """Handler for GetProductRegistryQuery."""

    def __init__(self, gateway):
        """Initialize handler with the inventory gateway."""
        self.loader = InventoryLoader(gateway)

    async def handle(self, query: GetProductRegistryQuery) -> ProductRegistryDTO:
        """
        Handle get product registry query.

        Args:
            query: GetProductRegistryQuery

        Returns:
            ProductRegistryDTO
        """
        snapshot = await self.loader.load(query.acting_user)
        registry = snapshot.registry
        entries = []
        for name in registry.names:
            used = snapshot.count_licenses_for(name)
            total = registry.total_for(name)
            entries.append(
                ProductEntryDTO(
                    name=name,
                    total=total,
                    used=used,
                    available=total - used,
                    has_recorded_total=name in registry.totals,
                )
            )
        return ProductRegistryDTO(products=entries)
