"""
Catalog value types.
Package and Hospital map 1:1 to the travel_packages.csv / travel_hospitals.csv
columns (aliases), but expose snake_case, strictly typed, frozen fields.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Sentinel used by the filter controls for "no filter"
ALL = "all"

ACCESSIBILITY_LEVELS = ("High", "Medium", "Low")

AccessibilityLevel = Literal["High", "Medium", "Low"]


def _yes_no(value):
    """Turn the Yes/No strings of the source data into booleans."""
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("yes", "y", "true", "1"):
            return True
        if normalized in ("no", "n", "false", "0", ""):
            return False
        raise ValueError(f"expected Yes/No, got {value!r}")
    return value


class Package(BaseModel):
    """A travel offering with pricing, dates and accessibility metadata."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    id: int = Field(alias="Package_ID")
    name: str = Field(alias="Package_Name", min_length=1)
    destination: str = Field(alias="Destination")
    country: str = Field(alias="Country")
    category: str = Field(alias="Category")
    season: str = Field(alias="Season")
    accessibility_level: AccessibilityLevel = Field(alias="Accessibility_Level")
    description: str = Field("", alias="Description")
    accommodation_type: str = Field("", alias="Accommodation_Type")
    transport_mode: str = Field("", alias="Transport_Mode")
    contact_number: str = Field("", alias="Contact_Number")

    base_price: float = Field(alias="Price_USD", ge=0)
    discount_percent: float = Field(0, alias="Discount_Percent", ge=0, le=100)
    duration_days: int = Field(alias="Duration_Days", gt=0)
    available_slots: int = Field(alias="Available_Slots", ge=0)
    rating: float = Field(0, alias="Rating", ge=0, le=5)

    start_date: date = Field(alias="Start_Date")
    end_date: date = Field(alias="End_Date")

    guide_included: bool = Field(False, alias="Guide_Included")
    meals_included: bool = Field(False, alias="Meals_Included")

    @field_validator("guide_included", "meals_included", mode="before")
    @classmethod
    def _parse_flags(cls, value):
        return _yes_no(value)

    @model_validator(mode="after")
    def _check_dates(self) -> "Package":
        if self.end_date < self.start_date:
            raise ValueError("End_Date is before Start_Date")
        return self


class Hospital(BaseModel):
    """A medical facility registered near a package destination."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    id: str = Field(alias="Hospital_ID")
    package_id: int = Field(alias="Package_ID")
    name: str = Field(alias="Hospital_Name")
    hospital_type: str = Field("", alias="Hospital_Type")
    city: str = Field("", alias="City")
    country: str = Field("", alias="Country")
    emergency_number: str = Field("", alias="Emergency_Number")
    address: str = Field("", alias="Address")
    distance_km: float = Field(alias="Distance_km_From_Destination", ge=0)
    open_24x7: bool = Field(False, alias="24x7_Service")
    ambulance_available: bool = Field(False, alias="Ambulance_Available")
    latitude: Optional[float] = Field(None, alias="Latitude", ge=-90, le=90)
    longitude: Optional[float] = Field(None, alias="Longitude", ge=-180, le=180)
    sos_response_time_min: Optional[int] = Field(None, alias="SOS_Response_Time_Min", ge=0)
    languages_supported: List[str] = Field(default_factory=list, alias="Languages_Supported")
    notes: str = Field("", alias="Notes")

    @field_validator("open_24x7", "ambulance_available", mode="before")
    @classmethod
    def _parse_flags(cls, value):
        return _yes_no(value)

    @field_validator("languages_supported", mode="before")
    @classmethod
    def _split_languages(cls, value):
        if isinstance(value, str):
            separator = "|" if "|" in value else ","
            return [lang.strip() for lang in value.split(separator) if lang.strip()]
        return value


class PackageQuery(BaseModel):
    """
    The active filter predicates for one evaluation pass.
    Rebuilt on every filter change and thrown away after use.
    """

    model_config = ConfigDict(frozen=True)

    term: str = ""
    category: Optional[str] = None
    accessibility: Optional[str] = None
    season: Optional[str] = None
    # Inclusive bounds on the discounted price; None means unbounded
    price_min: Optional[float] = None
    price_max: Optional[float] = None

    def is_noop(self) -> bool:
        return (
            not self.term
            and _unset(self.category)
            and _unset(self.accessibility)
            and _unset(self.season)
            and self.price_min is None
            and self.price_max is None
        )


def _unset(value: Optional[str]) -> bool:
    return value is None or value == ALL
