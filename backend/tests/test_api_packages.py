import pytest

from travel_assist.services import catalog_service

API = "/api/v1"


def ids(response):
    assert response.status_code == 200, response.text
    return [p["id"] for p in response.json()]


def test_list_packages(client):
    r = client.get(f"{API}/packages")
    assert ids(r) == [1, 2, 3, 4, 5, 6, 7, 8]
    first = r.json()[0]
    assert first["name"] == "Beach Escape"
    assert first["accessibility_level"] == "High"
    assert first["guide_included"] is True
    assert first["start_date"] == "2025-06-01"
    assert first["discounted_price"] == pytest.approx(800)


@pytest.mark.parametrize("params,expected", [
    ({"category": "Beach"}, [1, 8]),
    ({"category": "Beach", "price_min": 0, "price_max": 1000}, [1]),
    ({"term": "trek"}, [2]),
    ({"term": "JAPAN"}, [3]),
    ({"accessibility": "High"}, [1, 5, 6]),
    ({"season": "Spring", "category": "Cultural"}, [3, 7]),
    ({"category": "all", "accessibility": "all", "season": "all"}, [1, 2, 3, 4, 5, 6, 7, 8]),
    ({"price_min": 500, "price_max": 100}, []),
    ({"term": "atlantis"}, []),
])
def test_filter_packages(client, params, expected):
    assert ids(client.get(f"{API}/packages/filter", params=params)) == expected


def test_filter_price_range_uses_discounted_price(client):
    # Fjords cruise lists at 1750 with 25% off
    assert 6 in ids(client.get(f"{API}/packages/filter", params={"price_max": 1320}))
    assert 6 not in ids(client.get(f"{API}/packages/filter", params={"price_max": 1300}))


def test_filter_sorted_by_price(client):
    r = client.get(f"{API}/packages/filter", params={"season": "Summer", "sort": "price_asc"})
    prices = [p["discounted_price"] for p in r.json()]
    assert ids(r) == [1, 6, 4]
    assert prices == sorted(prices)


def test_unknown_sort_is_rejected(client):
    r = client.get(f"{API}/packages", params={"sort": "cheapest"})
    assert r.status_code == 422


def test_facets(client):
    r = client.get(f"{API}/packages/meta/facets")
    assert r.status_code == 200
    data = r.json()
    assert data["categories"] == ["Adventure", "Beach", "Cruise", "Cultural", "Wellness", "Wildlife"]
    assert data["accessibility_levels"] == ["High", "Medium", "Low"]
    assert data["seasons"] == ["Fall", "Spring", "Summer", "Winter"]
    assert data["price_min"] == pytest.approx(650)
    assert data["price_max"] == pytest.approx(1805)
    assert data["total_packages"] == 8


def test_get_package(client):
    r = client.get(f"{API}/packages/2")
    assert r.status_code == 200
    assert r.json()["name"] == "Mountain Trek"


def test_get_unknown_package(client):
    assert client.get(f"{API}/packages/999").status_code == 404


def test_quote(client):
    r = client.get(f"{API}/packages/1/quote", params={"travelers": 3})
    assert r.status_code == 200
    data = r.json()
    assert data["unit_price"] == pytest.approx(800)
    assert data["total_price"] == pytest.approx(2400)
    assert data["discount_percent"] == 20


@pytest.mark.parametrize("travelers", ["0", "-2", "two", "1.5", "1.0", "2e0"])
def test_quote_invalid_travelers(client, travelers):
    r = client.get(f"{API}/packages/1/quote", params={"travelers": travelers})
    assert r.status_code == 422


def test_quote_unknown_package(client):
    assert client.get(f"{API}/packages/999/quote").status_code == 404


def test_nearby_hospitals(client):
    r = client.get(f"{API}/packages/1/hospitals")
    assert r.status_code == 200
    assert [h["id"] for h in r.json()] == ["H003", "H002", "H001"]

    r = client.get(f"{API}/packages/1/hospitals", params={"open_24x7": True})
    assert [h["id"] for h in r.json()] == ["H002", "H001"]


def test_nearby_hospitals_none_registered(client):
    r = client.get(f"{API}/packages/7/hospitals")
    assert r.status_code == 200
    assert r.json() == []


def test_catalog_not_loaded(client):
    loaded = catalog_service.current_catalog()
    catalog_service.set_catalog(None)
    try:
        assert client.get(f"{API}/packages").status_code == 503
    finally:
        catalog_service.set_catalog(loaded)


def test_health(client):
    r = client.get(f"{API}/health/")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert data["database"] == "available"
    assert data["packages"] == 8
    assert data["hospitals"] == 7

    assert client.get(f"{API}/health/ready").json()["ready"] is True
    assert client.get(f"{API}/health/live").json()["alive"] is True


def test_security_headers(client):
    r = client.get("/")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Process-Time" in r.headers
