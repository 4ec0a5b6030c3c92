"""
GetLicenseInventoryQuery.

Query for the grouped inventory screen.
"""
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import ActingUser


@dataclass
class GetLicenseInventoryQuery:
    """
    Query for licenses grouped by product.

    ``search`` is a case-insensitive free-text filter; ``product``
    restricts the view to one product.
    """

    acting_user: ActingUser
    search: Optional[str] = None
    product: Optional[str] = None
