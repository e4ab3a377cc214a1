"""
Catalog Query Engine
Pure, stateless filtering, sorting and pricing over an in-memory
collection of Package records. No I/O, no mutation of the input.

Filtering is a single pass; a package survives iff every active
predicate matches (logical AND):
  1. term      - case-insensitive substring of name, destination or country
  2. category  - exact match unless None/"all"
  3. access    - exact match unless None/"all"
  4. season    - exact match unless None/"all"
  5. price     - price_min <= discounted price <= price_max (inclusive)
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence

from travel_assist.catalog.errors import InvalidInput
from travel_assist.catalog.models import ACCESSIBILITY_LEVELS, ALL, Hospital, Package, PackageQuery


# ---- Pricing ----

def discounted_price(pkg: Package) -> float:
    """Per-person price after discount, full precision (round at display time)."""
    return pkg.base_price * (1 - pkg.discount_percent / 100)


def quote(pkg: Package, travelers: int) -> float:
    """
    Total price for ``travelers`` people.

    Raises InvalidInput when travelers is not an integer >= 1; the
    count is never coerced.
    """
    if isinstance(travelers, bool) or not isinstance(travelers, int):
        raise InvalidInput(f"travelers must be an integer, got {travelers!r}")
    if travelers < 1:
        raise InvalidInput(f"travelers must be at least 1, got {travelers}")
    return discounted_price(pkg) * travelers


# ---- Filtering ----

def _matches_exact(value: str, wanted: Optional[str]) -> bool:
    return wanted is None or wanted == ALL or value == wanted


def _matches_term(pkg: Package, term: str) -> bool:
    if not term:
        return True
    needle = term.lower()
    return (
        needle in pkg.name.lower()
        or needle in pkg.destination.lower()
        or needle in pkg.country.lower()
    )


def _in_price_range(price: float, query: PackageQuery) -> bool:
    if query.price_min is not None and price < query.price_min:
        return False
    if query.price_max is not None and price > query.price_max:
        return False
    return True


def matches(pkg: Package, query: PackageQuery) -> bool:
    """True when ``pkg`` satisfies every active predicate of ``query``."""
    return (
        _matches_term(pkg, query.term)
        and _matches_exact(pkg.category, query.category)
        and _matches_exact(pkg.accessibility_level, query.accessibility)
        and _matches_exact(pkg.season, query.season)
        and _in_price_range(discounted_price(pkg), query)
    )


def filter_packages(packages: Sequence[Package], query: PackageQuery) -> List[Package]:
    """
    Return a new list with the packages matching ``query``, in input order.
    An inverted price range (min > max) matches nothing.
    """
    if not isinstance(query, PackageQuery):
        raise TypeError(f"query must be a PackageQuery, got {type(query).__name__}")

    empty_range = (
        query.price_min is not None
        and query.price_max is not None
        and query.price_min > query.price_max
    )

    result = []
    for pkg in packages:
        if not isinstance(pkg, Package):
            raise TypeError(f"expected Package records, got {type(pkg).__name__}")
        if not empty_range and matches(pkg, query):
            result.append(pkg)
    return result


# ---- Sorting ----

SORT_KEYS = {
    "price_asc": (lambda p: discounted_price(p), False),
    "price_desc": (lambda p: discounted_price(p), True),
    "rating": (lambda p: p.rating, True),
    "duration": (lambda p: p.duration_days, False),
    "discount": (lambda p: p.discount_percent, True),
}


def sort_packages(packages: Iterable[Package], sort_key: str) -> List[Package]:
    """Stable sort into a new list. Ties keep their input order."""
    try:
        key, reverse = SORT_KEYS[sort_key]
    except KeyError:
        raise InvalidInput(
            f"Unknown sort key: {sort_key}. Supported: {', '.join(sorted(SORT_KEYS))}"
        ) from None
    return sorted(packages, key=key, reverse=reverse)


# ---- Lookups ----

def find_package(packages: Iterable[Package], package_id: int) -> Optional[Package]:
    for pkg in packages:
        if pkg.id == package_id:
            return pkg
    return None


def facets(packages: Sequence[Package]) -> Dict[str, Any]:
    """Distinct filterable values, used to populate the filter controls."""
    prices = [discounted_price(p) for p in packages]
    return {
        "categories": sorted({p.category for p in packages}),
        "seasons": sorted({p.season for p in packages}),
        "accessibility_levels": [
            level for level in ACCESSIBILITY_LEVELS
            if any(p.accessibility_level == level for p in packages)
        ],
        "countries": sorted({p.country for p in packages}),
        "price_min": min(prices) if prices else None,
        "price_max": max(prices) if prices else None,
        "total_packages": len(packages),
    }


def nearby_hospitals(
    hospitals: Iterable[Hospital],
    package_id: int,
    *,
    open_24x7: Optional[bool] = None,
    ambulance: Optional[bool] = None,
) -> List[Hospital]:
    """Hospitals registered against a package, closest first."""
    found = [
        h for h in hospitals
        if h.package_id == package_id
        and (open_24x7 is None or h.open_24x7 == open_24x7)
        and (ambulance is None or h.ambulance_available == ambulance)
    ]
    return sorted(found, key=lambda h: h.distance_km)
