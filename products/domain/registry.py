"""
Product registry.

The registry is the set of known product names: every product referenced
by a license plus every key of the purchased-totals mapping. It is
immutable; each operation returns a new registry.
"""
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional, Tuple

from core.domain.exceptions import (
    DuplicateProductNameError,
    InvalidLicenseTotalError,
    InvalidProductNameError,
    ProductNotFoundError,
)
from licenses.domain.license import License

MAX_PRODUCT_NAME_LENGTH = 255

_TOTAL_RE = re.compile(r"\d+", re.ASCII)


def collation_key(name: str) -> Tuple[str, str]:
    """
    Sort key approximating locale-aware comparison.

    Accents and case are ignored on the primary level; the original
    string breaks ties so ordering is total.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), name


def sort_product_names(names: Iterable[str]) -> Tuple[str, ...]:
    """Return duplicate-free names in collation order."""
    return tuple(sorted(set(names), key=collation_key))


def normalize_product_name(name: Optional[str]) -> str:
    """
    Trim and validate a candidate product name.

    Raises:
        InvalidProductNameError: If the name is empty or too long
    """
    candidate = (name or "").strip()
    if not candidate:
        raise InvalidProductNameError()
    if len(candidate) > MAX_PRODUCT_NAME_LENGTH:
        raise InvalidProductNameError("Product name too long")
    return candidate


def parse_license_total(value) -> int:
    """
    Parse a purchased total.

    Integers and strings of ASCII digits are accepted; an empty string
    means 0. Signs, underscores and other digit systems are rejected.

    Raises:
        InvalidLicenseTotalError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise InvalidLicenseTotalError(value)
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        if not _TOTAL_RE.fullmatch(text):
            raise InvalidLicenseTotalError(value)
        parsed = int(text)
    else:
        raise InvalidLicenseTotalError(value)
    if parsed < 0:
        raise InvalidLicenseTotalError(value)
    return parsed


def rename_licenses(licenses: Iterable[License], old_name: str, new_name: str) -> Tuple[License, ...]:
    """Project a product rename over license records; ids are unchanged."""
    return tuple(
        license.with_product(new_name) if license.product == old_name else license
        for license in licenses
    )


@dataclass(frozen=True)
class ProductRegistry:
    """
    Known product names and their purchased totals.

    ``totals`` only holds products with a recorded total; products that
    are only referenced by licenses have an implicit total of 0.
    """

    names: Tuple[str, ...] = ()
    totals: Mapping[str, int] = field(default_factory=dict)

    @classmethod
    def derive(cls, licenses: Iterable[License], totals: Mapping[str, int]) -> "ProductRegistry":
        """
        Derive the registry from licenses and the totals mapping.

        Args:
            licenses: Current license records
            totals: Purchased totals keyed by product name

        Returns:
            Registry whose names are the union of license products and
            totals keys
        """
        from_licenses = {license.product for license in licenses}
        return cls(
            names=sort_product_names(from_licenses | set(totals)),
            totals=dict(totals),
        )

    def __contains__(self, name: str) -> bool:
        return name in self.names

    def __iter__(self):
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def total_for(self, name: str) -> int:
        return self.totals.get(name, 0)

    def find_case_insensitive(self, name: str, exclude: Optional[str] = None) -> Optional[str]:
        """Return an existing name equal to ``name`` ignoring case, if any."""
        wanted = name.casefold()
        for existing in self.names:
            if existing == exclude:
                continue
            if existing.casefold() == wanted:
                return existing
        return None

    def totals_with_defaults(self) -> Dict[str, int]:
        """Every registered name with its total, 0 where none is recorded."""
        return {name: self.total_for(name) for name in self.names}

    def add(self, name: str) -> "ProductRegistry":
        """
        Register a new product with a total of 0.

        Raises:
            InvalidProductNameError: If the trimmed name is empty
            DuplicateProductNameError: If a name differing only in case exists
        """
        candidate = normalize_product_name(name)
        if self.find_case_insensitive(candidate) is not None:
            raise DuplicateProductNameError(candidate)
        totals = dict(self.totals)
        totals[candidate] = 0
        return ProductRegistry(
            names=sort_product_names(self.names + (candidate,)),
            totals=totals,
        )

    def rename(self, old_name: str, new_name: str) -> "ProductRegistry":
        """
        Rename a product, moving its purchased total.

        Raises:
            ProductNotFoundError: If ``old_name`` is not registered
            InvalidProductNameError: If the trimmed new name is empty
            DuplicateProductNameError: If another product already uses the name
        """
        if old_name not in self.names:
            raise ProductNotFoundError(old_name)
        candidate = normalize_product_name(new_name)
        if candidate == old_name:
            return self
        if self.find_case_insensitive(candidate, exclude=old_name) is not None:
            raise DuplicateProductNameError(candidate)

        totals = dict(self.totals)
        if old_name in totals:
            totals[candidate] = totals.pop(old_name)
        names = [candidate if name == old_name else name for name in self.names]
        return ProductRegistry(names=sort_product_names(names), totals=totals)

    def remove(self, name: str) -> "ProductRegistry":
        """
        Forget a product name; license records are not touched.

        Raises:
            ProductNotFoundError: If the product is not registered
        """
        if name not in self.names:
            raise ProductNotFoundError(name)
        totals = {key: value for key, value in self.totals.items() if key != name}
        names = tuple(existing for existing in self.names if existing != name)
        return ProductRegistry(names=names, totals=totals)

    def set_total(self, name: str, value) -> "ProductRegistry":
        """
        Assign the purchased total of a product.

        Raises:
            ProductNotFoundError: If the product is not registered
            InvalidLicenseTotalError: If the value is not a non-negative integer
        """
        if name not in self.names:
            raise ProductNotFoundError(name)
        total = parse_license_total(value)
        totals = dict(self.totals)
        totals[name] = total
        return ProductRegistry(names=self.names, totals=totals)
