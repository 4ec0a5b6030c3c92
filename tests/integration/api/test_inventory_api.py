"""
Integration tests for Inventory API endpoints.
"""

import pytest
from django.urls import reverse

ADMIN = {"HTTP_X_USERNAME": "admin", "HTTP_X_USER_ROLE": "Admin"}
USER = {"HTTP_X_USERNAME": "jdoe", "HTTP_X_USER_ROLE": "User"}


def _group(data, product):
    return next(group for group in data["groups"] if group["product"] == product)


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAPI:
    """Integration tests for license endpoints."""

    def test_username_required(self, api_client, inventory_gateway):
        """Test inventory endpoints reject requests without a username."""
        response = api_client.get(reverse("inventory:licenses"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_REQUIRED"
        assert inventory_gateway.calls == []

    def test_list_licenses(self, api_client, inventory_gateway):
        """Test every product gets a section with usage counters."""
        response = api_client.get(reverse("inventory:licenses"), **USER)

        assert response.status_code == 200
        data = response.json()
        assert data["products"] == ["Acme Suite", "Globex CAD", "Initech Office", "Zeta Tools"]
        assert data["can_manage_products"] is False
        acme = _group(data, "Acme Suite")
        assert (acme["total"], acme["used"], acme["available"]) == (5, 2, 3)
        assert [row["id"] for row in acme["licenses"]] == [1, 2]
        assert _group(data, "Zeta Tools")["licenses"] == []
        initech = _group(data, "Initech Office")
        assert initech["has_shortage"] is True
        assert initech["licenses"][0]["approval_badge"]["status"] == "pending_approval"
        assert response["X-Correlation-ID"]

    def test_admin_can_manage_products(self, api_client, inventory_gateway):
        """Test the admin flag is exposed to the client."""
        response = api_client.get(reverse("inventory:licenses"), **ADMIN)

        assert response.json()["can_manage_products"] is True

    def test_search(self, api_client, inventory_gateway):
        """Test search matches product names and license attributes."""
        response = api_client.get(reverse("inventory:licenses"), {"search": "ACME"}, **USER)

        data = response.json()
        assert [group["product"] for group in data["groups"]] == ["Acme Suite", "Globex CAD"]
        globex = _group(data, "Globex CAD")
        assert [row["id"] for row in globex["licenses"]] == [3]
        assert globex["used"] == 1

    def test_product_filter(self, api_client, inventory_gateway):
        """Test the product filter keeps a single section."""
        response = api_client.get(
            reverse("inventory:licenses"), {"product": "Globex CAD"}, **USER
        )

        groups = response.json()["groups"]
        assert [group["product"] for group in groups] == ["Globex CAD"]
        assert groups[0]["licenses"][0]["expiration"]["status"] == "expired"

    def test_add_license_as_user(self, api_client, inventory_gateway):
        """Test a non-admin addition reports pending approval."""
        response = api_client.post(
            reverse("inventory:licenses"),
            {"product": "Globex CAD", "serial_key": "GX-2", "assigned_user": "frank"},
            format="json",
            **USER,
        )

        assert response.status_code == 201
        data = response.json()
        assert "approval" in data["message"]
        assert data["license"]["id"] == 5
        assert data["license"]["approval_status"] == "pending_approval"
        globex = _group(data["inventory"], "Globex CAD")
        assert globex["used"] == 2
        assert globex["has_shortage"] is True

    def test_add_license_as_admin(self, api_client, inventory_gateway):
        """Test an admin addition shows no approval message."""
        response = api_client.post(
            reverse("inventory:licenses"),
            {"product": "Acme Suite", "serial_key": "ACME-003"},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 201
        assert response.json()["message"] is None

    def test_add_license_without_product(self, api_client, inventory_gateway):
        """Test a blank product is rejected before any mutation."""
        response = api_client.post(
            reverse("inventory:licenses"),
            {"product": "", "serial_key": "X"},
            format="json",
            **USER,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        assert inventory_gateway.mutations() == []

    def test_update_license(self, api_client, inventory_gateway):
        """Test update replaces fields and keeps the id."""
        response = api_client.put(
            reverse("inventory:license-detail", args=[2]),
            {"product": "Globex CAD", "serial_key": "ACME-002", "assigned_user": "bob"},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "License updated"
        assert [row["id"] for row in _group(data["inventory"], "Globex CAD")["licenses"]] == [2, 3]
        assert _group(data["inventory"], "Acme Suite")["used"] == 1

    def test_delete_license_requires_confirmation(self, api_client, inventory_gateway):
        """Test deletion without confirm is refused."""
        response = api_client.delete(reverse("inventory:license-detail", args=[1]), **USER)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CONFIRMATION_REQUIRED"
        assert inventory_gateway.mutations() == []

    def test_delete_license(self, api_client, inventory_gateway):
        """Test confirmed deletion removes the license."""
        url = reverse("inventory:license-detail", args=[1]) + "?confirm=true"

        response = api_client.delete(url, **USER)

        assert response.status_code == 200
        assert [row["id"] for row in _group(response.json()["inventory"], "Acme Suite")["licenses"]] == [2]

    def test_remote_failure(self, api_client, inventory_gateway):
        """Test inventory API failures surface as 502."""
        inventory_gateway.fail("get_licenses")

        response = api_client.get(reverse("inventory:licenses"), **USER)

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "REMOTE_INVENTORY_ERROR"

    def test_add_license_reload_failure(self, api_client, inventory_gateway):
        """Test a created license is reported as created when the reload fails."""
        inventory_gateway.fail("get_licenses")

        response = api_client.post(
            reverse("inventory:licenses"),
            {"product": "Globex CAD", "serial_key": "GX-2"},
            format="json",
            **USER,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["inventory"] is None
        assert data["license"]["id"] == 5
        assert "could not be refreshed" in data["message"]
        assert len(inventory_gateway.licenses) == 5

    def test_update_license_reload_failure(self, api_client, inventory_gateway):
        """Test an applied update is not reported as a failure."""
        inventory_gateway.fail("get_licenses")

        response = api_client.put(
            reverse("inventory:license-detail", args=[2]),
            {"product": "Globex CAD"},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 200
        assert response.json()["inventory"] is None
        assert inventory_gateway.licenses[1].product == "Globex CAD"

    def test_delete_license_reload_failure(self, api_client, inventory_gateway):
        """Test an applied deletion is not reported as a failure."""
        inventory_gateway.fail("get_licenses")
        url = reverse("inventory:license-detail", args=[1]) + "?confirm=true"

        response = api_client.delete(url, **USER)

        assert response.status_code == 200
        assert response.json()["inventory"] is None
        assert [license.id for license in inventory_gateway.licenses] == [2, 3, 4]


@pytest.mark.django_db
@pytest.mark.integration
class TestProductAPI:
    """Integration tests for product registry endpoints."""

    def test_list_products(self, api_client, inventory_gateway):
        """Test the registry lists every product with usage."""
        response = api_client.get(reverse("inventory:products"), **USER)

        assert response.status_code == 200
        products = response.json()["products"]
        assert [entry["name"] for entry in products] == [
            "Acme Suite",
            "Globex CAD",
            "Initech Office",
            "Zeta Tools",
        ]
        assert products[2]["has_recorded_total"] is False

    def test_add_product_forbidden_for_users(self, api_client, inventory_gateway):
        """Test non-admins cannot add products."""
        response = api_client.post(
            reverse("inventory:products"), {"name": "Hooli"}, format="json", **USER
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "PRODUCT_MANAGEMENT_FORBIDDEN"

    def test_add_product(self, api_client, inventory_gateway):
        """Test an admin adds a product with a total of 0."""
        response = api_client.post(
            reverse("inventory:products"), {"name": " Hooli "}, format="json", **ADMIN
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Product 'Hooli' added"
        assert data["inventory"]["totals"]["Hooli"] == 0
        assert inventory_gateway.totals["Hooli"] == 0

    def test_add_duplicate_product(self, api_client, inventory_gateway):
        """Test a case-insensitive duplicate returns 409."""
        response = api_client.post(
            reverse("inventory:products"), {"name": "acme suite"}, format="json", **ADMIN
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_PRODUCT_NAME"
        assert inventory_gateway.mutations() == []

    def test_set_invalid_total(self, api_client, inventory_gateway):
        """Test a negative total is rejected and nothing changes."""
        response = api_client.patch(
            reverse("inventory:product-detail", args=["Acme Suite"]),
            {"total": -1},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_LICENSE_TOTAL"
        assert inventory_gateway.totals["Acme Suite"] == 5

    def test_set_total(self, api_client, inventory_gateway):
        """Test setting a total recomputes availability."""
        response = api_client.patch(
            reverse("inventory:product-detail", args=["Globex CAD"]),
            {"total": "4"},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 200
        globex = _group(response.json()["inventory"], "Globex CAD")
        assert (globex["total"], globex["available"]) == (4, 3)

    def test_set_total_unknown_product(self, api_client, inventory_gateway):
        """Test an unknown product returns 404."""
        response = api_client.patch(
            reverse("inventory:product-detail", args=["Nope"]),
            {"total": 1},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PRODUCT_NOT_FOUND"

    def test_rename_product(self, api_client, inventory_gateway):
        """Test rename moves licenses and total."""
        response = api_client.post(
            reverse("inventory:rename-product", args=["Acme Suite"]),
            {"new_name": "Acme Suite Pro"},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 200
        data = response.json()
        assert "Acme Suite" not in data["inventory"]["products"]
        renamed = _group(data["inventory"], "Acme Suite Pro")
        assert (renamed["total"], renamed["used"]) == (5, 2)

    def test_rename_collision(self, api_client, inventory_gateway):
        """Test renaming onto an existing product returns 409."""
        response = api_client.post(
            reverse("inventory:rename-product", args=["Acme Suite"]),
            {"new_name": "Zeta Tools"},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 409
        assert inventory_gateway.mutations() == []

    def test_partial_rename_is_reported(self, api_client, inventory_gateway):
        """Test a rename that could not move the total returns 502."""
        inventory_gateway.fail("save_license_totals")

        response = api_client.post(
            reverse("inventory:rename-product", args=["Acme Suite"]),
            {"new_name": "Acme Suite Pro"},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "PRODUCT_RENAME_INCOMPLETE"

    def test_remove_product(self, api_client, inventory_gateway):
        """Test confirmed removal drops the product."""
        url = reverse("inventory:product-detail", args=["Zeta Tools"]) + "?confirm=true"

        response = api_client.delete(url, **ADMIN)

        assert response.status_code == 200
        assert "Zeta Tools" not in response.json()["inventory"]["products"]
        assert "Zeta Tools" not in inventory_gateway.totals

    def test_remove_product_requires_confirmation(self, api_client, inventory_gateway):
        """Test removal without confirm is refused."""
        response = api_client.delete(
            reverse("inventory:product-detail", args=["Zeta Tools"]), **ADMIN
        )

        assert response.status_code == 400
        assert inventory_gateway.totals["Zeta Tools"] == 2

    def test_save_totals(self, api_client, inventory_gateway):
        """Test the whole totals mapping is replaced."""
        response = api_client.put(
            reverse("inventory:license-totals"),
            {"totals": {"Acme Suite": 7, "Globex CAD": ""}},
            format="json",
            **ADMIN,
        )

        assert response.status_code == 200
        assert response.json()["message"] == "License totals saved"
        assert inventory_gateway.totals == {"Acme Suite": 7, "Globex CAD": 0}


@pytest.mark.django_db
@pytest.mark.integration
class TestServiceEndpoints:
    """Health and correlation behaviour."""

    def test_health(self, api_client):
        """Test the health endpoint needs no username."""
        response = api_client.get(reverse("health"))

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_correlation_id_is_propagated(self, api_client, inventory_gateway):
        """Test a client correlation id is echoed back."""
        response = api_client.get(
            reverse("inventory:products"), HTTP_X_CORRELATION_ID="abc-123", **USER
        )

        assert response["X-Correlation-ID"] == "abc-123"


@pytest.mark.django_db
@pytest.mark.integration
class TestRemoveReferencedProduct:
    """Removing a product that licenses still use."""

    def test_product_stays_listed(self, api_client, inventory_gateway):
        """Test only the total is dropped while licenses reference the product."""
        url = reverse("inventory:product-detail", args=["Acme Suite"]) + "?confirm=true"

        response = api_client.delete(url, **ADMIN)

        assert response.status_code == 200
        data = response.json()
        assert "2 license(s) still reference it" in data["message"]
        acme = _group(data["inventory"], "Acme Suite")
        assert (acme["registered"], acme["total"], acme["used"]) == (True, 0, 2)
        assert data["inventory"]["orphaned_products"] == []

    def test_schema_describes_the_behaviour(self, api_client):
        """Test the OpenAPI description tells clients the product stays listed."""
        response = api_client.get(reverse("schema"), {"format": "json"})

        operation = response.json()["paths"]["/api/v1/inventory/products/{name}"]["delete"]
        assert "stays" in operation["description"]
        assert "listed" in operation["description"]
