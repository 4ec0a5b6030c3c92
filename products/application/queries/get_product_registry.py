"""
GetProductRegistryQuery.

Query for the product-management view.
"""
from dataclasses import dataclass

from core.domain.value_objects import ActingUser


@dataclass
class GetProductRegistryQuery:
    """Query for every known product with its purchased total."""

    acting_user: ActingUser
