"""
License handlers.

Handlers for add, update and delete license commands. Each mutation is
sent to the external API and followed by a full reload of the inventory.
"""
import logging
from typing import Optional

from core.domain.events import EventBus
from core.domain.exceptions import ConfirmationRequiredError, RemoteInventoryError
from core.domain.value_objects import ActingUser
from core.infrastructure.events import event_bus as default_event_bus
from licenses.application.commands.add_license import AddLicenseCommand
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.dto.license_dto import (
    InventoryMutationResultDTO,
    InventoryViewDTO,
    LicenseRowDTO,
)
from licenses.application.handlers.get_license_inventory_handler import (
    GetLicenseInventoryHandler,
)
from licenses.application.queries.get_license_inventory import GetLicenseInventoryQuery
from licenses.application.services.inventory_presenter import InventoryPresenter
from licenses.domain.events import LicenseAdded, LicenseDeleted, LicenseUpdated
from licenses.domain.services import LicenseApprovalPolicy
from licenses.ports.license_inventory_gateway import LicenseInventoryGateway

logger = logging.getLogger(__name__)

REFRESH_FAILED_MESSAGE = "Changes saved, but the inventory could not be refreshed"


class InventoryMutationHandler:
    """Shared plumbing of handlers that mutate the inventory."""

    def __init__(self, gateway: LicenseInventoryGateway, event_bus: EventBus = None):
        """Initialize handler with the inventory gateway and event bus."""
        self.gateway = gateway
        self.event_bus = event_bus or default_event_bus

    async def reload(self, user: ActingUser) -> InventoryViewDTO:
        """Fetch licenses and totals again and derive the unfiltered view."""
        return await GetLicenseInventoryHandler(self.gateway).handle(
            GetLicenseInventoryQuery(acting_user=user)
        )

    async def result(
        self,
        user: ActingUser,
        message: Optional[str],
        license: Optional[LicenseRowDTO] = None,
    ) -> InventoryMutationResultDTO:
        """
        Build the result of an applied mutation with the reloaded inventory.

        The mutation has already been accepted by the API, so a failed
        reload does not fail the request: the inventory is left out and
        the message tells the client to refresh.
        """
        try:
            inventory = await self.reload(user)
        except RemoteInventoryError as e:
            logger.error(
                "Inventory reload after mutation failed: %s", e.message,
                extra={"actor": user.username},
            )
            inventory = None
            if message:
                message = f"{message.rstrip('.')}. {REFRESH_FAILED_MESSAGE}"
            else:
                message = REFRESH_FAILED_MESSAGE
        return InventoryMutationResultDTO(message=message, inventory=inventory, license=license)


class AddLicenseHandler(InventoryMutationHandler):
    """Handler for AddLicenseCommand."""

    async def handle(self, command: AddLicenseCommand) -> InventoryMutationResultDTO:
        """
        Handle add license command.

        Args:
            command: AddLicenseCommand

        Returns:
            InventoryMutationResultDTO with the created license

        Raises:
            RemoteInventoryError: If the API rejects the license
        """
        user = command.acting_user
        try:
            created = await self.gateway.add_license(command.fields, user)
        except RemoteInventoryError:
            logger.error(
                "Failed to add license for product %s", command.fields.product,
                extra={"actor": user.username},
            )
            raise

        logger.info(
            "License %s added to %s (approval_status=%s)",
            created.id,
            created.product,
            created.approval_status,
            extra={"actor": user.username},
        )
        await self.event_bus.publish(
            LicenseAdded(
                aggregate_id=str(created.id),
                actor=user.username,
                license_id=created.id,
                product=created.product,
                approval_status=created.approval_status,
            )
        )

        return await self.result(
            user,
            LicenseApprovalPolicy.creation_message(user, created),
            license=InventoryPresenter().license_row(created),
        )


class UpdateLicenseHandler(InventoryMutationHandler):
    """Handler for UpdateLicenseCommand."""

    async def handle(self, command: UpdateLicenseCommand) -> InventoryMutationResultDTO:
        """
        Handle update license command.

        Args:
            command: UpdateLicenseCommand

        Returns:
            InventoryMutationResultDTO with the updated license

        Raises:
            RemoteInventoryError: If the API rejects the update
        """
        user = command.acting_user
        try:
            updated = await self.gateway.update_license(
                command.license_id, command.fields, user.username
            )
        except RemoteInventoryError:
            logger.error(
                "Failed to update license %s", command.license_id,
                extra={"actor": user.username},
            )
            raise

        await self.event_bus.publish(
            LicenseUpdated(
                aggregate_id=str(command.license_id),
                actor=user.username,
                license_id=command.license_id,
                product=updated.product,
            )
        )

        return await self.result(
            user, "License updated", license=InventoryPresenter().license_row(updated)
        )


class DeleteLicenseHandler(InventoryMutationHandler):
    """Handler for DeleteLicenseCommand."""

    async def handle(self, command: DeleteLicenseCommand) -> InventoryMutationResultDTO:
        """
        Handle delete license command.

        Args:
            command: DeleteLicenseCommand

        Returns:
            InventoryMutationResultDTO

        Raises:
            ConfirmationRequiredError: If the deletion was not confirmed
            RemoteInventoryError: If the API rejects the deletion
        """
        if not command.confirmed:
            raise ConfirmationRequiredError("Deleting a license must be confirmed")

        user = command.acting_user
        try:
            await self.gateway.delete_license(command.license_id, user.username)
        except RemoteInventoryError:
            logger.error(
                "Failed to delete license %s", command.license_id,
                extra={"actor": user.username},
            )
            raise

        await self.event_bus.publish(
            LicenseDeleted(
                aggregate_id=str(command.license_id),
                actor=user.username,
                license_id=command.license_id,
            )
        )

        return await self.result(user, "License deleted")
