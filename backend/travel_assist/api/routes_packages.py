from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import Any, Dict, List, Optional
import logging
import re

from travel_assist.catalog import engine
from travel_assist.catalog.errors import InvalidInput
from travel_assist.catalog.models import Hospital, Package, PackageQuery
from travel_assist.core.rate_limiting import limiter, SEARCH_LIMIT
from travel_assist.services.catalog_service import Catalog, get_catalog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["packages"])

_INTEGER = re.compile(r"-?\d+")


def _package_to_dict(package: Package) -> Dict[str, Any]:
    """Convert a package record to a dictionary for API response."""
    data = package.model_dump(mode="json")
    data["discounted_price"] = engine.discounted_price(package)
    return data


def _hospital_to_dict(hospital: Hospital) -> Dict[str, Any]:
    return hospital.model_dump(mode="json")


def _sorted(packages: List[Package], sort: Optional[str]) -> List[Package]:
    if not sort:
        return packages
    try:
        return engine.sort_packages(packages, sort)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))


def _get_package_or_404(catalog: Catalog, package_id: int) -> Package:
    package = engine.find_package(catalog.packages, package_id)
    if package is None:
        raise HTTPException(status_code=404, detail="Package not found")
    return package


# ============================================================================
# CATALOG ENDPOINTS - in-memory catalog loaded from CSV
# ============================================================================

@router.get("/packages", response_model=List[Dict[str, Any]])
def list_packages(
    sort: Optional[str] = Query(None, description="price_asc / price_desc / rating / duration / discount"),
    catalog: Catalog = Depends(get_catalog),
):
    """List the whole catalog in source order (or sorted)."""
    packages = _sorted(list(catalog.packages), sort)
    return [_package_to_dict(p) for p in packages]


@router.get("/packages/filter", response_model=List[Dict[str, Any]])
@limiter.limit(SEARCH_LIMIT)
def filter_packages(
    request: Request,
    term: str = Query("", max_length=200, description="Matches name, destination or country"),
    category: Optional[str] = Query(None, description="Exact category, or 'all'"),
    accessibility: Optional[str] = Query(None, description="High / Medium / Low, or 'all'"),
    season: Optional[str] = Query(None, description="Exact season, or 'all'"),
    price_min: Optional[float] = Query(None, description="Minimum discounted price"),
    price_max: Optional[float] = Query(None, description="Maximum discounted price"),
    sort: Optional[str] = Query(None, description="price_asc / price_desc / rating / duration / discount"),
    catalog: Catalog = Depends(get_catalog),
):
    """
    Filter packages by multiple criteria.
    All filters are optional and combined with AND; price bounds apply to
    the discounted price. An inverted price range returns an empty list.
    """
    query = PackageQuery(
        term=term,
        category=category,
        accessibility=accessibility,
        season=season,
        price_min=price_min,
        price_max=price_max,
    )
    packages = engine.filter_packages(catalog.packages, query)
    logger.debug(f"Filter query returned {len(packages)} packages")
    return [_package_to_dict(p) for p in _sorted(packages, sort)]


@router.get("/packages/meta/facets", response_model=Dict[str, Any])
def get_facets(catalog: Catalog = Depends(get_catalog)):
    """Distinct categories, seasons, accessibility levels, countries and the price span."""
    return engine.facets(catalog.packages)


@router.get("/packages/{package_id}", response_model=Dict[str, Any])
def get_package(package_id: int, catalog: Catalog = Depends(get_catalog)):
    """Get package by ID."""
    return _package_to_dict(_get_package_or_404(catalog, package_id))


@router.get("/packages/{package_id}/quote", response_model=Dict[str, Any])
def quote_package(
    package_id: int,
    travelers: str = Query("1", max_length=12, description="Number of travelers (>= 1)"),
    catalog: Catalog = Depends(get_catalog),
):
    """Total price for a package and traveler count."""
    package = _get_package_or_404(catalog, package_id)
    # Taken raw so "1.0" or "2.5" are rejected instead of truncated
    if not _INTEGER.fullmatch(travelers):
        raise HTTPException(status_code=422, detail=f"travelers must be an integer, got {travelers!r}")
    travelers = int(travelers)
    try:
        total = engine.quote(package, travelers)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "package_id": package.id,
        "travelers": travelers,
        "base_price": package.base_price,
        "discount_percent": package.discount_percent,
        "unit_price": engine.discounted_price(package),
        "total_price": total,
    }


@router.get("/packages/{package_id}/hospitals", response_model=List[Dict[str, Any]])
def get_nearby_hospitals(
    package_id: int,
    open_24x7: Optional[bool] = Query(None, description="Only hospitals with 24x7 service"),
    ambulance: Optional[bool] = Query(None, description="Only hospitals with an ambulance"),
    catalog: Catalog = Depends(get_catalog),
):
    """Medical facilities registered near the package destination, closest first."""
    _get_package_or_404(catalog, package_id)
    hospitals = engine.nearby_hospitals(
        catalog.hospitals, package_id, open_24x7=open_24x7, ambulance=ambulance
    )
    return [_hospital_to_dict(h) for h in hospitals]
