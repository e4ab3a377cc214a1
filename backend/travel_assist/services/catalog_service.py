"""
Catalog holder.
The package and hospital collections are loaded once at startup and
shared read-only by every request (tuples of frozen records, no locking).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from fastapi import HTTPException

from travel_assist.catalog.models import Hospital, Package
from travel_assist.core.config import settings
from travel_assist.ingestion.csv_loader import load_hospitals, load_packages

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Catalog:
    packages: Tuple[Package, ...] = ()
    hospitals: Tuple[Hospital, ...] = ()


_catalog: Optional[Catalog] = None


def load_catalog(
    packages_path: Optional[str] = None,
    hospitals_path: Optional[str] = None,
) -> Catalog:
    """Load both CSV sources and install the result as the process catalog."""
    global _catalog
    packages = load_packages(packages_path or settings.packages_csv_path)
    hospitals = load_hospitals(hospitals_path or settings.hospitals_csv_path)
    _catalog = Catalog(packages=packages, hospitals=hospitals)
    logger.info(f"Catalog ready: {len(packages)} packages, {len(hospitals)} hospitals")
    return _catalog


def set_catalog(catalog: Optional[Catalog]) -> None:
    global _catalog
    _catalog = catalog


def current_catalog() -> Optional[Catalog]:
    return _catalog


def get_catalog() -> Catalog:
    """FastAPI dependency. 503 until the catalog has been loaded."""
    if _catalog is None:
        raise HTTPException(status_code=503, detail="Service unavailable: catalog not loaded")
    return _catalog
