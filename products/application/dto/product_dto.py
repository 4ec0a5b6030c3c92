"""
Product registry DTOs for API responses.
"""
from dataclasses import dataclass
from typing import List


@dataclass
class ProductEntryDTO:
    """DTO for one product in the product-management view."""

    name: str
    total: int
    used: int
    available: int
    has_recorded_total: bool


@dataclass
class ProductRegistryDTO:
    """DTO for the product-management view."""

    products: List[ProductEntryDTO]
