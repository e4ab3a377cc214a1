"""
Booking and Favorites API Routes
================================
Bookings are priced with the catalog quote at creation time and stored
as pending. Authentication is handled upstream; callers pass user_id.

Endpoints:
  POST   /bookings                    -- Create a pending booking
  GET    /bookings                    -- Bookings for a user
  POST   /bookings/{id}/cancel        -- Cancel a booking
  GET    /favorites                   -- Favorite packages for a user
  POST   /favorites                   -- Save a favorite
  DELETE /favorites/{package_id}      -- Remove a favorite
"""

from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from pydantic import BaseModel, Field, StrictInt
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional
import logging

from travel_assist.api.routes_packages import _package_to_dict
from travel_assist.catalog import engine
from travel_assist.catalog.errors import InvalidInput
from travel_assist.core.rate_limiting import limiter, BOOKING_LIMIT
from travel_assist.db.database import get_db
from travel_assist.db.models import Booking
from travel_assist.db.repositories import BookingRepository, FavoriteRepository
from travel_assist.services.catalog_service import Catalog, get_catalog

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------

class BookingRequest(BaseModel):
    """Booking form. Dates default to the package's own dates."""
    user_id: str = Field(..., min_length=1, max_length=64)
    package_id: int
    # Strict: JSON true, 2.0 or "2" are rejected, never coerced
    travelers: StrictInt = 1
    travel_start_date: Optional[date] = None
    travel_end_date: Optional[date] = None
    special_requirements: str = Field("", max_length=2000)


class FavoriteRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    package_id: int


def _booking_to_dict(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.id,
        "user_id": booking.user_id,
        "package_id": booking.package_id,
        "package_name": booking.package_name,
        "travel_start_date": booking.travel_start_date.isoformat(),
        "travel_end_date": booking.travel_end_date.isoformat(),
        "number_of_travelers": booking.number_of_travelers,
        "total_price": booking.total_price,
        "status": booking.status,
        "special_requirements": booking.special_requirements or "",
        "created_at": booking.created_at.isoformat() if booking.created_at else None,
    }


# ============================================================================
# BOOKINGS
# ============================================================================

@router.post("/bookings", status_code=201, response_model=Dict[str, Any])
@limiter.limit(BOOKING_LIMIT)
def create_booking(
    request: Request,
    body: BookingRequest,
    catalog: Catalog = Depends(get_catalog),
    db: Session = Depends(get_db),
):
    """Create a pending booking priced by the catalog quote."""
    package = engine.find_package(catalog.packages, body.package_id)
    if package is None:
        raise HTTPException(status_code=404, detail="Package not found")

    try:
        total = engine.quote(package, body.travelers)
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))

    repo = BookingRepository(db)
    # Cancelled bookings give their slots back
    remaining = max(package.available_slots - repo.booked_travelers(package.id), 0)
    if body.travelers > remaining:
        raise HTTPException(
            status_code=422,
            detail=f"Only {remaining} slots available for this package",
        )

    start = body.travel_start_date or package.start_date
    end = body.travel_end_date or package.end_date
    if end < start:
        raise HTTPException(status_code=422, detail="travel_end_date is before travel_start_date")

    booking = repo.create(
        user_id=body.user_id,
        package_id=package.id,
        package_name=package.name,
        travel_start_date=start,
        travel_end_date=end,
        number_of_travelers=body.travelers,
        total_price=total,
        special_requirements=body.special_requirements,
    )
    return _booking_to_dict(booking)


@router.get("/bookings", response_model=List[Dict[str, Any]])
def list_bookings(
    user_id: str = Query(..., min_length=1, max_length=64),
    db: Session = Depends(get_db),
):
    """Bookings for a user, newest first."""
    return [_booking_to_dict(b) for b in BookingRepository(db).list_for_user(user_id)]


@router.post("/bookings/{booking_id}/cancel", response_model=Dict[str, Any])
def cancel_booking(booking_id: int, db: Session = Depends(get_db)):
    booking = BookingRepository(db).cancel(booking_id)
    if booking is None:
        raise HTTPException(status_code=404, detail="Booking not found")
    return _booking_to_dict(booking)


# ============================================================================
# FAVORITES
# ============================================================================

@router.get("/favorites", response_model=List[Dict[str, Any]])
def list_favorites(
    user_id: str = Query(..., min_length=1, max_length=64),
    catalog: Catalog = Depends(get_catalog),
    db: Session = Depends(get_db),
):
    """Favorite packages for a user. Ids no longer in the catalog are skipped."""
    favorites = []
    for package_id in FavoriteRepository(db).list_package_ids(user_id):
        package = engine.find_package(catalog.packages, package_id)
        if package is not None:
            favorites.append(_package_to_dict(package))
    return favorites


@router.post("/favorites", status_code=201)
def add_favorite(
    body: FavoriteRequest,
    catalog: Catalog = Depends(get_catalog),
    db: Session = Depends(get_db),
):
    if engine.find_package(catalog.packages, body.package_id) is None:
        raise HTTPException(status_code=404, detail="Package not found")
    created = FavoriteRepository(db).add(body.user_id, body.package_id)
    return {"package_id": body.package_id, "created": created}


@router.delete("/favorites/{package_id}")
def remove_favorite(
    package_id: int,
    user_id: str = Query(..., min_length=1, max_length=64),
    db: Session = Depends(get_db),
):
    if not FavoriteRepository(db).remove(user_id, package_id):
        raise HTTPException(status_code=404, detail="Favorite not found")
    return {"package_id": package_id, "removed": True}
