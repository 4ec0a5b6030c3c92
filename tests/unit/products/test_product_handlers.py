"""
Unit tests for product registry handlers.
"""
import pytest

from core.domain.exceptions import (
    ConfirmationRequiredError,
    DuplicateProductNameError,
    InvalidLicenseTotalError,
    InvalidProductNameError,
    ProductManagementForbiddenError,
    ProductNotFoundError,
    ProductRenameIncompleteError,
    RemoteInventoryError,
)
from licenses.application.handlers.license_handlers import REFRESH_FAILED_MESSAGE
from products.application.commands.add_product import AddProductCommand
from products.application.commands.remove_product import RemoveProductCommand
from products.application.commands.rename_product import RenameProductCommand
from products.application.commands.save_license_totals import SaveLicenseTotalsCommand
from products.application.commands.set_product_total import SetProductTotalCommand
from products.application.handlers.product_handlers import (
    AddProductHandler,
    GetProductRegistryHandler,
    RemoveProductHandler,
    RenameProductHandler,
    SaveLicenseTotalsHandler,
    SetProductTotalHandler,
)
from products.application.queries.get_product_registry import GetProductRegistryQuery
from products.domain.events import (
    LicenseTotalsSaved,
    ProductAdded,
    ProductRemoved,
    ProductRenamed,
)
from tests.fakes import RecordingEventHandler


@pytest.fixture
def recorder(event_bus):
    """Record every product event published on the test bus."""
    handler = RecordingEventHandler()
    for event_type in (ProductAdded, ProductRenamed, ProductRemoved, LicenseTotalsSaved):
        event_bus.subscribe(event_type, handler)
    return handler


def _group(inventory, product):
    return next(group for group in inventory.groups if group.product == product)


@pytest.mark.asyncio
class TestAdminOnly:
    """Product management is reserved to administrators."""

    @pytest.mark.parametrize(
        "handler_class,command",
        [
            (AddProductHandler, lambda user: AddProductCommand(name="Hooli", acting_user=user)),
            (
                RenameProductHandler,
                lambda user: RenameProductCommand(
                    old_name="Acme Suite", new_name="Acme", acting_user=user
                ),
            ),
            (
                RemoveProductHandler,
                lambda user: RemoveProductCommand(
                    name="Zeta Tools", acting_user=user, confirmed=True
                ),
            ),
            (
                SetProductTotalHandler,
                lambda user: SetProductTotalCommand(name="Zeta Tools", total=3, acting_user=user),
            ),
            (
                SaveLicenseTotalsHandler,
                lambda user: SaveLicenseTotalsCommand(acting_user=user, totals={"Zeta Tools": 3}),
            ),
        ],
    )
    async def test_non_admin_forbidden(
        self, handler_class, command, gateway, event_bus, regular_user
    ):
        """Test non-admins are rejected before any call."""
        with pytest.raises(ProductManagementForbiddenError):
            await handler_class(gateway, event_bus).handle(command(regular_user))

        assert gateway.calls == []


@pytest.mark.asyncio
class TestAddProductHandler:
    """Tests for AddProductHandler."""

    async def test_add_product(self, gateway, event_bus, recorder, admin_user):
        """Test a new product is saved with a total of 0."""
        handler = AddProductHandler(gateway, event_bus)

        result = await handler.handle(AddProductCommand(name="  Hooli Chat ", acting_user=admin_user))

        assert gateway.totals["Hooli Chat"] == 0
        assert gateway.totals["Acme Suite"] == 5
        assert "Hooli Chat" in result.inventory.products
        assert _group(result.inventory, "Hooli Chat").licenses == []
        assert recorder.event_types() == ["LicenseTotalsSaved", "ProductAdded"]

    async def test_duplicate_ignoring_case(self, gateway, event_bus, admin_user):
        """Test a case variant is rejected without a write."""
        handler = AddProductHandler(gateway, event_bus)

        with pytest.raises(DuplicateProductNameError):
            await handler.handle(AddProductCommand(name="ZETA TOOLS", acting_user=admin_user))

        assert gateway.mutations() == []

    async def test_empty_name_rejected_before_any_call(self, gateway, event_bus, admin_user):
        """Test an empty name never reaches the gateway."""
        handler = AddProductHandler(gateway, event_bus)

        with pytest.raises(InvalidProductNameError):
            await handler.handle(AddProductCommand(name="   ", acting_user=admin_user))

        assert gateway.calls == []


@pytest.mark.asyncio
class TestRenameProductHandler:
    """Tests for RenameProductHandler."""

    async def test_rename_moves_licenses_and_total(self, gateway, event_bus, recorder, admin_user):
        """Test licenses and the total move together; ids are unchanged."""
        handler = RenameProductHandler(gateway, event_bus)

        result = await handler.handle(
            RenameProductCommand(
                old_name="Acme Suite", new_name="Acme Suite Pro", acting_user=admin_user
            )
        )

        assert gateway.mutations() == ["rename_product", "save_license_totals"]
        assert gateway.totals == {"Acme Suite Pro": 5, "Globex CAD": 1, "Zeta Tools": 2}
        assert [(lic.id, lic.product) for lic in gateway.licenses[:2]] == [
            (1, "Acme Suite Pro"),
            (2, "Acme Suite Pro"),
        ]
        assert "Acme Suite" not in result.inventory.products
        assert _group(result.inventory, "Acme Suite Pro").used == 2
        assert "ProductRenamed" in recorder.event_types()

    async def test_rename_without_recorded_total(self, gateway, event_bus, admin_user):
        """Test no totals write when the product had no recorded total."""
        handler = RenameProductHandler(gateway, event_bus)

        await handler.handle(
            RenameProductCommand(
                old_name="Initech Office", new_name="Initech 365", acting_user=admin_user
            )
        )

        assert gateway.mutations() == ["rename_product"]
        assert gateway.licenses[3].product == "Initech 365"

    async def test_collision_leaves_everything_unchanged(self, gateway, event_bus, admin_user):
        """Test a duplicate name aborts before any write."""
        handler = RenameProductHandler(gateway, event_bus)

        with pytest.raises(DuplicateProductNameError):
            await handler.handle(
                RenameProductCommand(
                    old_name="Acme Suite", new_name="globex cad", acting_user=admin_user
                )
            )

        assert gateway.mutations() == []
        assert gateway.totals["Acme Suite"] == 5
        assert gateway.licenses[0].product == "Acme Suite"

    async def test_same_name_is_a_no_op(self, gateway, event_bus, admin_user):
        """Test renaming to the identical name issues no write."""
        handler = RenameProductHandler(gateway, event_bus)

        result = await handler.handle(
            RenameProductCommand(old_name="Acme Suite", new_name="Acme Suite", acting_user=admin_user)
        )

        assert result.message == "Product name unchanged"
        assert gateway.mutations() == []

    async def test_unknown_product(self, gateway, event_bus, admin_user):
        """Test renaming an unknown product."""
        handler = RenameProductHandler(gateway, event_bus)

        with pytest.raises(ProductNotFoundError):
            await handler.handle(
                RenameProductCommand(old_name="Nope", new_name="Other", acting_user=admin_user)
            )

    async def test_rename_failure(self, gateway, event_bus, recorder, admin_user):
        """Test a failed license rename leaves totals untouched."""
        gateway.fail("rename_product")
        handler = RenameProductHandler(gateway, event_bus)

        with pytest.raises(RemoteInventoryError) as exc_info:
            await handler.handle(
                RenameProductCommand(
                    old_name="Acme Suite", new_name="Acme Suite Pro", acting_user=admin_user
                )
            )

        assert not isinstance(exc_info.value, ProductRenameIncompleteError)
        assert gateway.totals["Acme Suite"] == 5
        assert recorder.events == []

    async def test_totals_failure_is_reported_as_incomplete(self, gateway, event_bus, admin_user):
        """Test a failure after licenses moved surfaces as an incomplete rename."""
        gateway.fail("save_license_totals")
        handler = RenameProductHandler(gateway, event_bus)

        with pytest.raises(ProductRenameIncompleteError) as exc_info:
            await handler.handle(
                RenameProductCommand(
                    old_name="Acme Suite", new_name="Acme Suite Pro", acting_user=admin_user
                )
            )

        assert exc_info.value.code == "PRODUCT_RENAME_INCOMPLETE"
        assert exc_info.value.old_name == "Acme Suite"
        assert gateway.licenses[0].product == "Acme Suite Pro"
        assert gateway.totals["Acme Suite"] == 5


@pytest.mark.asyncio
class TestRemoveProductHandler:
    """Tests for RemoveProductHandler."""

    async def test_unconfirmed_is_a_no_op(self, gateway, event_bus, admin_user):
        """Test nothing happens without confirmation."""
        handler = RemoveProductHandler(gateway, event_bus)

        with pytest.raises(ConfirmationRequiredError):
            await handler.handle(RemoveProductCommand(name="Zeta Tools", acting_user=admin_user))

        assert gateway.calls == []

    async def test_remove_unused_product(self, gateway, event_bus, recorder, admin_user):
        """Test a product without licenses disappears."""
        handler = RemoveProductHandler(gateway, event_bus)

        result = await handler.handle(
            RemoveProductCommand(name="Zeta Tools", acting_user=admin_user, confirmed=True)
        )

        assert "Zeta Tools" not in gateway.totals
        assert "Zeta Tools" not in result.inventory.products
        assert result.message == "Product 'Zeta Tools' removed"
        removed = [event for event in recorder.events if isinstance(event, ProductRemoved)]
        assert removed[0].licenses_still_referencing == 0

    async def test_remove_keeps_licenses(self, gateway, event_bus, recorder, admin_user):
        """Test licenses are not touched and stay listed."""
        handler = RemoveProductHandler(gateway, event_bus)

        result = await handler.handle(
            RemoveProductCommand(name="Acme Suite", acting_user=admin_user, confirmed=True)
        )

        assert "Acme Suite" not in gateway.totals
        assert len(gateway.licenses) == 4
        assert "2 license(s) still reference it" in result.message
        acme = _group(result.inventory, "Acme Suite")
        assert (acme.total, acme.used) == (0, 2)
        removed = [event for event in recorder.events if isinstance(event, ProductRemoved)]
        assert removed[0].licenses_still_referencing == 2

    async def test_remove_product_without_total_issues_no_write(
        self, gateway, event_bus, admin_user
    ):
        """Test nothing is saved when there is no total to drop."""
        handler = RemoveProductHandler(gateway, event_bus)

        await handler.handle(
            RemoveProductCommand(name="Initech Office", acting_user=admin_user, confirmed=True)
        )

        assert gateway.mutations() == []

    async def test_remove_unknown(self, gateway, event_bus, admin_user):
        """Test removing an unknown product."""
        handler = RemoveProductHandler(gateway, event_bus)

        with pytest.raises(ProductNotFoundError):
            await handler.handle(
                RemoveProductCommand(name="Nope", acting_user=admin_user, confirmed=True)
            )


@pytest.mark.asyncio
class TestSetProductTotalHandler:
    """Tests for SetProductTotalHandler."""

    async def test_set_total(self, gateway, event_bus, recorder, admin_user):
        """Test the total is saved and counts recomputed."""
        handler = SetProductTotalHandler(gateway, event_bus)

        result = await handler.handle(
            SetProductTotalCommand(name="Initech Office", total="3", acting_user=admin_user)
        )

        assert gateway.totals["Initech Office"] == 3
        initech = _group(result.inventory, "Initech Office")
        assert (initech.total, initech.available, initech.has_shortage) == (3, 2, False)
        assert recorder.event_types() == ["LicenseTotalsSaved"]

    @pytest.mark.parametrize("total", [-1, "-1", "abc"])
    async def test_invalid_total_is_rejected(self, total, gateway, event_bus, admin_user):
        """Test invalid totals never reach the gateway and the old value stays."""
        handler = SetProductTotalHandler(gateway, event_bus)

        with pytest.raises(InvalidLicenseTotalError):
            await handler.handle(
                SetProductTotalCommand(name="Acme Suite", total=total, acting_user=admin_user)
            )

        assert gateway.calls == []
        assert gateway.totals["Acme Suite"] == 5

    async def test_save_failure_keeps_previous_total(self, gateway, event_bus, admin_user):
        """Test a failed save does not apply."""
        gateway.fail("save_license_totals")
        handler = SetProductTotalHandler(gateway, event_bus)

        with pytest.raises(RemoteInventoryError):
            await handler.handle(
                SetProductTotalCommand(name="Acme Suite", total=9, acting_user=admin_user)
            )

        assert gateway.totals["Acme Suite"] == 5


@pytest.mark.asyncio
class TestSaveLicenseTotalsHandler:
    """Tests for SaveLicenseTotalsHandler."""

    async def test_save_all_totals(self, gateway, event_bus, admin_user):
        """Test the whole mapping is replaced."""
        handler = SaveLicenseTotalsHandler(gateway, event_bus)

        await handler.handle(
            SaveLicenseTotalsCommand(
                acting_user=admin_user,
                totals={"Acme Suite": "6", "Initech Office": 1, "Zeta Tools": ""},
            )
        )

        assert gateway.totals == {"Acme Suite": 6, "Initech Office": 1, "Zeta Tools": 0}

    async def test_one_invalid_value_rejects_the_save(self, gateway, event_bus, admin_user):
        """Test any invalid entry aborts the whole save."""
        handler = SaveLicenseTotalsHandler(gateway, event_bus)

        with pytest.raises(InvalidLicenseTotalError):
            await handler.handle(
                SaveLicenseTotalsCommand(
                    acting_user=admin_user, totals={"Acme Suite": 6, "Zeta Tools": "-2"}
                )
            )

        assert gateway.calls == []
        assert gateway.totals["Acme Suite"] == 5

    async def test_case_variants_rejected(self, gateway, event_bus, admin_user):
        """Test two keys differing only in case are rejected."""
        handler = SaveLicenseTotalsHandler(gateway, event_bus)

        with pytest.raises(DuplicateProductNameError):
            await handler.handle(
                SaveLicenseTotalsCommand(
                    acting_user=admin_user, totals={"Acme Suite": 1, "ACME SUITE": 2}
                )
            )


@pytest.mark.asyncio
class TestGetProductRegistryHandler:
    """Tests for GetProductRegistryHandler."""

    async def test_registry_entries(self, gateway, regular_user):
        """Test each product with total, usage and recorded-total flag."""
        result = await GetProductRegistryHandler(gateway).handle(
            GetProductRegistryQuery(acting_user=regular_user)
        )

        entries = {entry.name: entry for entry in result.products}
        assert [entry.name for entry in result.products] == [
            "Acme Suite",
            "Globex CAD",
            "Initech Office",
            "Zeta Tools",
        ]
        assert (entries["Acme Suite"].total, entries["Acme Suite"].used) == (5, 2)
        assert entries["Initech Office"].available == -1
        assert entries["Initech Office"].has_recorded_total is False
        assert entries["Zeta Tools"].has_recorded_total is True


@pytest.mark.asyncio
class TestReloadFailureAfterProductChange:
    """Product changes saved remotely are reported as saved when the reload fails."""

    async def test_add_product(self, gateway, event_bus, recorder, admin_user):
        """Test the add is reported with the refresh notice."""
        gateway.fail_after("get_licenses", 1)
        handler = AddProductHandler(gateway, event_bus)

        result = await handler.handle(AddProductCommand(name="Hooli", acting_user=admin_user))

        assert gateway.totals["Hooli"] == 0
        assert result.inventory is None
        assert result.message == f"Product 'Hooli' added. {REFRESH_FAILED_MESSAGE}"
        assert "ProductAdded" in recorder.event_types()

    async def test_set_total(self, gateway, event_bus, admin_user):
        """Test a saved total is not reported as a failure."""
        gateway.fail_after("get_license_totals", 1)
        handler = SetProductTotalHandler(gateway, event_bus)

        result = await handler.handle(
            SetProductTotalCommand(name="Acme Suite", total=9, acting_user=admin_user)
        )

        assert gateway.totals["Acme Suite"] == 9
        assert result.inventory is None

    async def test_unchanged_rename_still_fails(self, gateway, event_bus, admin_user):
        """Test a no-op rename reports a failed reload since nothing was saved."""
        gateway.fail_after("get_licenses", 1)
        handler = RenameProductHandler(gateway, event_bus)

        with pytest.raises(RemoteInventoryError):
            await handler.handle(
                RenameProductCommand(
                    old_name="Acme Suite", new_name="Acme Suite", acting_user=admin_user
                )
            )
