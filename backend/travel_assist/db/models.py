"""
Database models -- SQLAlchemy ORM definitions.
Only user-generated records live here (bookings, favorites); the package
catalog itself is loaded from CSV into memory.
Compatible with both PostgreSQL and SQLite.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class Booking(Base):
    """
    A booking request for a package.
    total_price is the quote at booking time (discounted price x travelers).
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    package_id = Column(Integer, nullable=False, index=True)
    package_name = Column(Text, nullable=False)
    travel_start_date = Column(Date, nullable=False)
    travel_end_date = Column(Date, nullable=False)
    number_of_travelers = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    status = Column(String(16), nullable=False, default="pending", index=True)
    special_requirements = Column(Text, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class Favorite(Base):
    """A package saved by a user."""
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "package_id", name="uq_favorite_user_package"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    package_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
