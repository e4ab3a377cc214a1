"""
Repository pattern for data access.
Bookings and favorites; all writes commit immediately.
"""

from datetime import date
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from travel_assist.db.models import Booking, Favorite

logger = logging.getLogger(__name__)


class BookingRepository:
    """Repository for Booking records (bookings table)."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: str,
        package_id: int,
        package_name: str,
        travel_start_date: date,
        travel_end_date: date,
        number_of_travelers: int,
        total_price: float,
        special_requirements: str = "",
    ) -> Booking:
        """Insert a pending booking and return it."""
        booking = Booking(
            user_id=user_id,
            package_id=package_id,
            package_name=package_name,
            travel_start_date=travel_start_date,
            travel_end_date=travel_end_date,
            number_of_travelers=number_of_travelers,
            total_price=total_price,
            status="pending",
            special_requirements=special_requirements,
        )
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking.id} created for package {package_id} ({number_of_travelers} travelers)")
        return booking

    def get(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def list_for_user(self, user_id: str) -> List[Booking]:
        """Bookings for a user, newest first."""
        return (
            self.db.query(Booking)
            .filter(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    def booked_travelers(self, package_id: int) -> int:
        """Travelers held by non-cancelled bookings of a package."""
        total = (
            self.db.query(func.coalesce(func.sum(Booking.number_of_travelers), 0))
            .filter(Booking.package_id == package_id, Booking.status != "cancelled")
            .scalar()
        )
        return int(total)

    def cancel(self, booking_id: int) -> Optional[Booking]:
        booking = self.get(booking_id)
        if booking is None:
            return None
        booking.status = "cancelled"
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Booking {booking_id} cancelled")
        return booking


class FavoriteRepository:
    """Repository for Favorite records (favorites table)."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, user_id: str, package_id: int) -> bool:
        """Save a favorite. Returns False when it was already saved."""
        exists = self.db.query(Favorite).filter(
            Favorite.user_id == user_id,
            Favorite.package_id == package_id,
        ).first()
        if exists:
            return False
        self.db.add(Favorite(user_id=user_id, package_id=package_id))
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent insert of the same pair
            self.db.rollback()
            return False
        return True

    def remove(self, user_id: str, package_id: int) -> bool:
        deleted = self.db.query(Favorite).filter(
            Favorite.user_id == user_id,
            Favorite.package_id == package_id,
        ).delete()
        self.db.commit()
        return deleted > 0

    def list_package_ids(self, user_id: str) -> List[int]:
        rows = (
            self.db.query(Favorite.package_id)
            .filter(Favorite.user_id == user_id)
            .order_by(Favorite.created_at, Favorite.id)
            .all()
        )
        return [r[0] for r in rows]
