import logging
from datetime import date

import pytest

from travel_assist.catalog.errors import IngestionError
from travel_assist.ingestion.csv_loader import load_hospitals, load_packages

from conftest import FIXTURES

HEADER = (
    "Package_ID,Package_Name,Destination,Country,Duration_Days,Price_USD,Accommodation_Type,"
    "Transport_Mode,Season,Accessibility_Level,Description,Rating,Available_Slots,Guide_Included,"
    "Start_Date,End_Date,Category,Discount_Percent,Meals_Included,Contact_Number"
)


def row(pid=1, name="Beach Escape", price="1000", access="High", start="2025-06-01",
        end="2025-06-05", discount="20", guide="Yes", meals="No", days="5"):
    return (
        f"{pid},{name},Goa,India,{days},{price},Resort,Flight,Summer,{access},"
        f"Nice place,4.5,12,{guide},{start},{end},Beach,{discount},{meals},+91-555"
    )


def write_csv(tmp_path, *rows):
    path = tmp_path / "packages.csv"
    path.write_text("\n".join((HEADER,) + rows) + "\n", encoding="utf-8")
    return path


def test_parses_typed_package(tmp_path):
    packages = load_packages(write_csv(tmp_path, row()), strict=True)
    assert len(packages) == 1
    pkg = packages[0]
    assert pkg.id == 1
    assert pkg.base_price == 1000.0
    assert pkg.discount_percent == 20.0
    assert pkg.start_date == date(2025, 6, 1)
    assert pkg.guide_included is True
    assert pkg.meals_included is False
    assert pkg.accommodation_type == "Resort"


def test_returns_tuple_in_file_order(tmp_path):
    packages = load_packages(write_csv(tmp_path, row(pid=3), row(pid=1), row(pid=2)))
    assert isinstance(packages, tuple)
    assert [p.id for p in packages] == [3, 1, 2]


@pytest.mark.parametrize("bad_row", [
    row(pid=2, discount="120"),
    row(pid=2, discount="-5"),
    row(pid=2, price="-1"),
    row(pid=2, price="cheap"),
    row(pid=2, access="Full"),
    row(pid=2, start="2025-06-10", end="2025-06-01"),
    row(pid=2, guide="Maybe"),
    row(pid=2, days="0"),
])
def test_lenient_mode_rejects_bad_rows(tmp_path, caplog, bad_row):
    path = write_csv(tmp_path, row(pid=1), bad_row, row(pid=3))
    with caplog.at_level(logging.WARNING, logger="travel_assist.ingestion.csv_loader"):
        packages = load_packages(path, strict=False)
    assert [p.id for p in packages] == [1, 3]
    assert any("packages.csv:3" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("bad_row", [
    row(pid=2, discount="150"),
    row(pid=2, access="Very High"),
])
def test_strict_mode_raises_with_line(tmp_path, bad_row):
    path = write_csv(tmp_path, row(pid=1), bad_row)
    with pytest.raises(IngestionError) as exc_info:
        load_packages(path, strict=True)
    assert exc_info.value.line == 3


def test_values_are_never_clamped(tmp_path):
    packages = load_packages(write_csv(tmp_path, row(pid=1, discount="100.5")), strict=False)
    assert packages == ()


def test_duplicate_ids_keep_first(tmp_path):
    path = write_csv(tmp_path, row(pid=1, name="First"), row(pid=1, name="Second"))
    assert [p.name for p in load_packages(path, strict=False)] == ["First"]
    with pytest.raises(IngestionError):
        load_packages(path, strict=True)


def test_blank_lines_skipped(tmp_path):
    path = write_csv(tmp_path, row(pid=1), "", ",,,,", row(pid=2))
    assert [p.id for p in load_packages(path, strict=True)] == [1, 2]


def test_missing_file(tmp_path):
    with pytest.raises(IngestionError):
        load_packages(tmp_path / "nope.csv")


def test_fixture_catalog_loads_cleanly():
    packages = load_packages(FIXTURES / "packages.csv", strict=True)
    hospitals = load_hospitals(FIXTURES / "hospitals.csv", strict=True)
    assert len(packages) == 8
    assert len(hospitals) == 7


def test_hospital_fields():
    hospitals = load_hospitals(FIXTURES / "hospitals.csv", strict=True)
    first = hospitals[0]
    assert first.id == "H001"
    assert first.package_id == 1
    assert first.open_24x7 is True
    assert first.ambulance_available is True
    assert first.languages_supported == ["English", "Hindi", "Konkani"]
    assert hospitals[-1].notes == ""


def test_undecodable_file_raises_in_both_modes(tmp_path):
    path = tmp_path / "packages.csv"
    path.write_bytes(HEADER.encode() + b"\n" + row().encode() + b"\n2,\xff\xfe\xfa bad\n")
    with pytest.raises(IngestionError, match="Unreadable"):
        load_packages(path, strict=False)
    with pytest.raises(IngestionError, match="Unreadable"):
        load_packages(path, strict=True)


def test_oversized_field_raises(tmp_path):
    path = write_csv(tmp_path, row(name="x" * 200_000))
    with pytest.raises(IngestionError, match="Unreadable"):
        load_packages(path, strict=False)
