"""
Grouping, filtering and usage counting of licenses by product.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from licenses.domain.license import License


@dataclass(frozen=True)
class ProductUsage:
    """Purchased versus used counts for one product."""

    product: str
    total: int
    used: int

    @property
    def available(self) -> int:
        """Purchased minus in use; negative means over-allocated."""
        return self.total - self.used

    @property
    def has_shortage(self) -> bool:
        return self.available < 0

    @classmethod
    def compute(
        cls, product: str, licenses: Sequence[License], totals: Mapping[str, int]
    ) -> "ProductUsage":
        return cls(product=product, total=totals.get(product, 0), used=len(licenses))


@dataclass(frozen=True)
class ProductGroup:
    """
    Licenses listed under one product.

    ``registered`` is False for products that licenses reference but the
    registry does not know about.
    """

    product: str
    licenses: Tuple[License, ...]
    usage: ProductUsage
    registered: bool = True


def group_by_product(
    licenses: Iterable[License], product_names: Iterable[str]
) -> Tuple[Dict[str, List[License]], List[License]]:
    """
    Partition licenses by product.

    Args:
        licenses: License records
        product_names: Registry names; each gets a group even when empty

    Returns:
        Tuple of (grouped, orphans). ``grouped`` maps every registry name
        to its licenses in input order; ``orphans`` holds licenses whose
        product is not a registry name.
    """
    grouped: Dict[str, List[License]] = {name: [] for name in product_names}
    orphans: List[License] = []
    for license in licenses:
        bucket = grouped.get(license.product)
        if bucket is None:
            orphans.append(license)
        else:
            bucket.append(license)
    return grouped, orphans


def license_matches(license: License, search: str) -> bool:
    """True if any attribute of the license contains ``search``, ignoring case."""
    needle = search.lower()
    return any(needle in value.lower() for value in license.searchable_values())


def filter_groups(groups: Sequence[ProductGroup], search: Optional[str]) -> List[ProductGroup]:
    """
    Apply free-text search to product groups.

    A group is kept when its product name matches or at least one of its
    licenses matches; a kept group lists only the matching licenses.
    Usage counts are left as computed on the whole group.
    """
    if not search:
        return list(groups)

    needle = search.lower()
    filtered = []
    for group in groups:
        matching = tuple(license for license in group.licenses if license_matches(license, needle))
        if needle in group.product.lower() or matching:
            filtered.append(
                ProductGroup(
                    product=group.product,
                    licenses=matching,
                    usage=group.usage,
                    registered=group.registered,
                )
            )
    return filtered


def build_product_groups(
    licenses: Iterable[License],
    product_names: Sequence[str],
    totals: Mapping[str, int],
) -> List[ProductGroup]:
    """
    Build one group per registry name, followed by groups for orphaned licenses.

    Orphans are grouped under their own product name and tagged
    ``registered=False``.
    """
    grouped, orphans = group_by_product(licenses, product_names)
    groups = [
        ProductGroup(
            product=name,
            licenses=tuple(grouped[name]),
            usage=ProductUsage.compute(name, grouped[name], totals),
        )
        for name in product_names
    ]

    orphan_groups: Dict[str, List[License]] = {}
    for license in orphans:
        orphan_groups.setdefault(license.product, []).append(license)
    for name, members in orphan_groups.items():
        groups.append(
            ProductGroup(
                product=name,
                licenses=tuple(members),
                usage=ProductUsage.compute(name, members, totals),
                registered=False,
            )
        )
    return groups
