"""
Pytest configuration and shared fixtures.
"""

from datetime import date

import pytest

from core.domain.value_objects import ActingUser, UserRole
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.license import License, LicenseFields
from licenses.infrastructure.gateways.provider import (
    get_inventory_gateway,
    reset_inventory_gateway,
)
from tests.fakes import InMemoryLicenseInventoryGateway

TODAY = date(2024, 6, 15)


@pytest.fixture
def today():
    """Reference date used by expiration tests."""
    return TODAY


@pytest.fixture
def admin_user():
    """Fixture for an administrator."""
    return ActingUser(username="admin", role=UserRole.ADMIN)


@pytest.fixture
def regular_user():
    """Fixture for a non-admin user."""
    return ActingUser(username="jdoe", role=UserRole.USER)


@pytest.fixture
def sample_licenses():
    """
    Licenses spread over three products.

    Relative to TODAY: license 1 expires in 10 days, license 2 is
    perpetual, license 3 expired yesterday, license 4 is far in the future.
    """
    return [
        License(
            id=1,
            product="Acme Suite",
            serial_key="ACME-001",
            assigned_user="alice",
            department="Finance",
            expiration_date="2024-06-25",
        ),
        License(
            id=2,
            product="Acme Suite",
            serial_key="ACME-002",
            assigned_user="bob",
            expiration_date="N/A",
        ),
        License(
            id=3,
            product="Globex CAD",
            serial_key="GX-1",
            assigned_user="carol",
            notes="moved from acme laptop",
            expiration_date="2024-06-14",
        ),
        License(
            id=4,
            product="Initech Office",
            serial_key="IO-9",
            assigned_user="dave",
            expiration_date="2099/12/31",
            approval_status="pending_approval",
        ),
    ]


@pytest.fixture
def sample_totals():
    """Purchased totals; Zeta Tools has no licenses, Initech Office no total."""
    return {"Acme Suite": 5, "Globex CAD": 1, "Zeta Tools": 2}


@pytest.fixture
def gateway(sample_licenses, sample_totals):
    """In-memory gateway seeded with the sample inventory."""
    return InMemoryLicenseInventoryGateway(sample_licenses, sample_totals)


@pytest.fixture
def event_bus():
    """Fresh event bus with no subscribers."""
    return InMemoryEventBus()


@pytest.fixture
def new_license_fields():
    """Fields for a license about to be created."""
    return LicenseFields(
        product="Acme Suite",
        serial_key="ACME-003",
        assigned_user="erin",
        license_type="Subscription",
        expiration_date="2025-01-31",
    )


@pytest.fixture
def inventory_gateway(sample_licenses, sample_totals):
    """
    Gateway instance served to the API views.

    Test settings point LICENSE_INVENTORY_GATEWAY at the in-memory
    gateway; the fixture seeds the instance the provider hands out.
    """
    reset_inventory_gateway()
    gateway = get_inventory_gateway()
    gateway.seed(sample_licenses, sample_totals)
    yield gateway
    reset_inventory_gateway()


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()
