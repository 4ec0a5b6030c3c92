"""
Inventory derivation.

The inventory view is derived from two independently fetched collections,
the license list and the purchased-totals mapping. Derivation is pure and
needs no network access.
"""
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from licenses.domain.grouping import ProductGroup, build_product_groups, filter_groups
from licenses.domain.license import License
from products.domain.registry import ProductRegistry


@dataclass(frozen=True)
class InventoryView:
    """Registry plus the grouped, filtered licenses shown on the screen."""

    registry: ProductRegistry
    groups: Tuple[ProductGroup, ...]

    @property
    def orphaned_products(self) -> List[str]:
        return [group.product for group in self.groups if not group.registered]


def derive_inventory(
    licenses: Iterable[License],
    totals: Mapping[str, int],
    search: Optional[str] = None,
    product: Optional[str] = None,
    registry: Optional[ProductRegistry] = None,
) -> InventoryView:
    """
    Derive the inventory view.

    Args:
        licenses: License records
        totals: Purchased totals keyed by product name
        search: Free-text query, case-insensitive
        product: Exact product name to restrict the view to
        registry: Registry to group against; derived from ``licenses``
            and ``totals`` when omitted

    Returns:
        InventoryView
    """
    licenses = list(licenses)
    if registry is None:
        registry = ProductRegistry.derive(licenses, totals)

    groups = build_product_groups(licenses, registry.names, registry.totals)
    if product:
        groups = [group for group in groups if group.product == product]
    groups = filter_groups(groups, search)
    return InventoryView(registry=registry, groups=tuple(groups))
