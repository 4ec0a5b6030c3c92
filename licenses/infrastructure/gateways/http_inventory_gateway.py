"""
HTTP implementation of LicenseInventoryGateway port.

This adapter talks to the external inventory API with ``requests`` and
converts between its JSON wire format and domain entities.
"""
import logging
import time
from typing import Any, Dict, List, Optional

import requests
from asgiref.sync import sync_to_async
from django.conf import settings

from core.domain.exceptions import InvalidLicenseTotalError, RemoteInventoryError
from core.domain.value_objects import ActingUser
from core.metrics import inventory_remote_duration_seconds, inventory_remote_failures_total
from licenses.domain.license import License, LicenseFields
from licenses.ports.license_inventory_gateway import LicenseInventoryGateway
from products.domain.registry import parse_license_total

logger = logging.getLogger(__name__)

# Domain attribute -> wire key of the external API
WIRE_FIELDS = {
    "product": "produto",
    "license_type": "tipoLicenca",
    "serial_key": "chaveSerial",
    "expiration_date": "dataExpiracao",
    "assigned_user": "usuario",
    "job_title": "cargo",
    "department": "setor",
    "manager": "gestor",
    "cost_center": "centroCusto",
    "ledger_account": "contaRazao",
    "computer_name": "nomeComputador",
    "ticket_number": "numeroChamado",
    "notes": "observacoes",
}


def _decode_id(value: Any) -> int:
    """Decode a license id; integers and digit strings only."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdigit():
        return int(value.strip())
    raise RemoteInventoryError("decode_license", f"invalid license id {value!r}")


def _decode_text(value: Any, key: str) -> Optional[str]:
    """Decode an optional text field; numbers are kept as their string form."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise RemoteInventoryError("decode_license", f"invalid value for {key!r}")


def _decode_total(name: str, value: Any) -> int:
    """Decode a purchased total; absent means 0, integral floats are accepted."""
    if value is None:
        return 0
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        return parse_license_total(value)
    except InvalidLicenseTotalError:
        raise RemoteInventoryError(
            "get_license_totals", f"invalid total {value!r} for {name!r}"
        ) from None


class HttpLicenseInventoryGateway(LicenseInventoryGateway):
    """
    requests-based implementation of LicenseInventoryGateway.

    This adapter:
    1. Converts wire payloads to domain entities
    2. Converts domain entities to wire payloads
    3. Turns every transport or HTTP failure into RemoteInventoryError
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize gateway.

        Args:
            base_url: API root; defaults to LICENSE_INVENTORY_API["BASE_URL"]
            token: Bearer token; defaults to LICENSE_INVENTORY_API["TOKEN"]
            timeout: Request timeout in seconds
            session: requests session to reuse
        """
        config = getattr(settings, "LICENSE_INVENTORY_API", {})
        self.base_url = (base_url or config.get("BASE_URL", "")).rstrip("/")
        self.token = token if token is not None else config.get("TOKEN")
        self.timeout = timeout or config.get("TIMEOUT", 10)
        self.session = session or requests.Session()

    def _to_domain(self, data: Dict[str, Any]) -> License:
        """
        Convert a wire record to a License entity.

        Args:
            data: JSON object from the API

        Returns:
            License domain entity

        Raises:
            RemoteInventoryError: If the record has no usable id or a
                field holds a non-scalar value
        """
        if not isinstance(data, dict) or data.get("id") is None:
            raise RemoteInventoryError("decode_license", "license record without id")
        attributes = {name: _decode_text(data.get(key), key) for name, key in WIRE_FIELDS.items()}
        attributes["serial_key"] = attributes["serial_key"] or ""
        attributes["assigned_user"] = attributes["assigned_user"] or ""
        attributes["product"] = attributes["product"] or ""
        return License(
            id=_decode_id(data["id"]),
            approval_status=_decode_text(data.get("approval_status"), "approval_status"),
            rejection_reason=_decode_text(data.get("rejection_reason"), "rejection_reason"),
            **attributes,
        )

    def _to_payload(self, fields: LicenseFields) -> Dict[str, Any]:
        """
        Convert license fields to a wire payload.

        Args:
            fields: Editable license attributes

        Returns:
            JSON-serializable dict keyed by wire names
        """
        return {key: getattr(fields, name) for name, key in WIRE_FIELDS.items()}

    def _headers(self, acting_username: Optional[str] = None) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if acting_username:
            headers["X-Acting-User"] = acting_username
        return headers

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        acting_username: Optional[str] = None,
        **kwargs,
    ) -> Any:
        """
        Perform one API call.

        Args:
            operation: Logical operation name used in logs and metrics
            method: HTTP method
            path: Path below the API root
            acting_username: Value for the X-Acting-User header

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            RemoteInventoryError: On transport errors, non-2xx responses
                or undecodable bodies
        """
        url = f"{self.base_url}{path}"
        start = time.monotonic()
        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(acting_username),
                timeout=self.timeout,
                **kwargs,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            inventory_remote_failures_total.labels(operation=operation).inc()
            logger.error("Inventory API %s %s failed: %s", method, url, e)
            raise RemoteInventoryError(operation, str(e)) from e
        finally:
            inventory_remote_duration_seconds.labels(operation=operation).observe(
                time.monotonic() - start
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            inventory_remote_failures_total.labels(operation=operation).inc()
            logger.error("Inventory API %s %s returned invalid JSON", method, url)
            raise RemoteInventoryError(operation, "invalid JSON response") from e

    @sync_to_async(thread_sensitive=False)
    def get_licenses(self, user: ActingUser) -> List[License]:
        """
        List the licenses visible to a user.

        Args:
            user: Acting user

        Returns:
            List of License entities
        """
        data = self._request(
            "get_licenses",
            "GET",
            "/licenses",
            acting_username=user.username,
            params={"username": user.username, "role": user.role.value},
        )
        return [self._to_domain(item) for item in data or []]

    @sync_to_async
    def add_license(self, fields: LicenseFields, user: ActingUser) -> License:
        """
        Create a license.

        Args:
            fields: Editable license attributes
            user: Acting user

        Returns:
            Created License entity
        """
        payload = self._to_payload(fields)
        payload["requestedBy"] = user.username
        payload["requesterRole"] = user.role.value
        data = self._request(
            "add_license", "POST", "/licenses", acting_username=user.username, json=payload
        )
        if data is None:
            raise RemoteInventoryError("add_license", "empty response")
        return self._to_domain(data)

    @sync_to_async
    def update_license(
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
        payload = self._to_payload(fields)
        payload["id"] = license_id
        data = self._request(
            "update_license",
            "PUT",
            f"/licenses/{license_id}",
            acting_username=acting_username,
            json=payload,
        )
        if data is None:
            return License.from_fields(license_id, fields)
        return self._to_domain(data)

    @sync_to_async
    def delete_license(self, license_id: int, acting_username: str) -> None:
        """
        Delete a license permanently.

        Args:
            license_id: License id
            acting_username: Who performs the change
        """
        self._request(
            "delete_license",
            "DELETE",
            f"/licenses/{license_id}",
            acting_username=acting_username,
        )

    @sync_to_async(thread_sensitive=False)
    def get_license_totals(self) -> Dict[str, int]:
        """
        Fetch the purchased totals.

        Returns:
            Mapping of product name to purchased total
        """
        data = self._request("get_license_totals", "GET", "/license-totals")
        if not isinstance(data, dict):
            return {}
        return {str(name): _decode_total(str(name), total) for name, total in data.items()}

    @sync_to_async
    def save_license_totals(self, totals: Dict[str, int], acting_username: str) -> None:
        """
        Replace the whole purchased-totals mapping.

        Args:
            totals: New mapping
            acting_username: Who performs the change
        """
        self._request(
            "save_license_totals",
            "PUT",
            "/license-totals",
            acting_username=acting_username,
            json=dict(totals),
        )

    @sync_to_async
    def rename_product(self, old_name: str, new_name: str, acting_username: str) -> None:
        """
        Rename a product on every stored license.

        Args:
            old_name: Current product name
            new_name: New product name
            acting_username: Who performs the change
        """
        self._request(
            "rename_product",
            "POST",
            "/products/rename",
            acting_username=acting_username,
            json={"oldName": old_name, "newName": new_name},
        )
