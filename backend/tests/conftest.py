import os
from pathlib import Path

FIXTURES = Path(__file__).parent / "fixtures"

# Configure before travel_assist.core.config builds its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["INGESTION_STRICT"] = "false"
os.environ["PACKAGES_CSV_PATH"] = str(FIXTURES / "packages.csv")
os.environ["HOSPITALS_CSV_PATH"] = str(FIXTURES / "hospitals.csv")

from datetime import date

import pytest
from fastapi.testclient import TestClient

from travel_assist.catalog.models import Package


def make_package(**overrides) -> Package:
    fields = dict(
        id=1,
        name="Beach Escape",
        destination="Goa",
        country="India",
        category="Beach",
        season="Summer",
        accessibility_level="High",
        description="",
        base_price=1000,
        discount_percent=20,
        duration_days=5,
        available_slots=10,
        rating=4.5,
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 5),
        guide_included=True,
        meals_included=True,
    )
    fields.update(overrides)
    return Package(**fields)


@pytest.fixture
def beach():
    return make_package()


@pytest.fixture
def trek():
    return make_package(
        id=2,
        name="Mountain Trek",
        destination="Zermatt",
        country="Switzerland",
        category="Adventure",
        season="Winter",
        accessibility_level="Low",
        base_price=800,
        discount_percent=0,
        duration_days=7,
        rating=4.3,
        start_date=date(2025, 12, 10),
        end_date=date(2025, 12, 16),
    )


@pytest.fixture
def packages(beach, trek):
    return (
        beach,
        trek,
        make_package(
            id=3, name="Kyoto Temples", destination="Kyoto", country="Japan",
            category="Cultural", season="Spring", accessibility_level="Medium",
            base_price=1450, discount_percent=10, rating=4.8,
        ),
        make_package(
            id=4, name="Reef Discovery", destination="Cairns", country="Australia",
            category="Beach", season="Winter", accessibility_level="Medium",
            base_price=1600, discount_percent=30, rating=4.6,
        ),
        make_package(
            id=5, name="Free Cruise", destination="Bergen", country="Norway",
            category="Cruise", season="Summer", accessibility_level="High",
            base_price=1750, discount_percent=100, rating=4.4,
        ),
    )


@pytest.fixture
def client():
    from travel_assist.db.database import engine
    from travel_assist.db.models import Base
    from travel_assist.main import app

    with TestClient(app) as c:
        yield c
    Base.metadata.drop_all(bind=engine)
