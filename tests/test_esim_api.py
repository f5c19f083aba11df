from fastapi.testclient import TestClient

from app.main import app
from app.services import esim as esim_service

client = TestClient(app)

BASE = "/api/v1/esim"


def _plan_payload(plan_id: str, price: float, data: str, duration: str, rating: float, **extra) -> dict:
    payload = {
        "id": plan_id,
        "provider": plan_id.split("-")[0].title(),
        "data": data,
        "duration": duration,
        "price": price,
        "network_rating": rating,
    }
    payload.update(extra)
    return payload


VIEW_PLANS = [
    _plan_payload("airalo-FR-0", 9.0, "3 GB", "15 days", 4.5),
    _plan_payload("holafly-FR-0", 27.0, "Unlimited", "30 days", 4.7),
    _plan_payload("nomad-FR-0", 15.0, "10 GB", "30 days", 4.4, data_type="5G"),
]


def test_health_and_readiness():
    health = client.get("/healthz")
    assert health.status_code == 200
    assert health.json()["status"] == "ok"

    ready = client.get("/readyz")
    assert ready.status_code == 200
    body = ready.json()
    assert body["status"] == "ready"
    assert body["live_scraping"] is False
    assert body["sources"] == ["synthetic"]


def test_list_plans_returns_scored_plans():
    resp = client.get(f"{BASE}/plans", params={"country_code": "FR", "country_name": "France"})
    assert resp.status_code == 200
    body = resp.json()

    assert body["success"] is True
    assert body["source"] == "synthetic"
    assert body["currency"] == "USD"
    assert len(body["data"]) == 5
    prices = [p["price"] for p in body["data"]]
    assert prices == sorted(prices)
    assert all(0 <= p["value_score"] <= 100 for p in body["data"])
    assert all(p["display_price"].startswith("$") for p in body["data"])
    assert body["stats"]["total_plans"] == 5
    assert body["stats"]["providers"] == 5
    assert body["stats"]["min_price"] == prices[0]


def test_list_plans_in_euros():
    resp = client.get(
        f"{BASE}/plans",
        params={"country_code": "FR", "country_name": "France", "currency": "EUR"},
    )
    body = resp.json()

    assert body["currency"] == "EUR"
    assert all(p["display_price"].startswith("€") for p in body["data"])
    # Raw prices stay in USD.
    assert body["stats"]["min_price"] == round(min(p["price"] for p in body["data"]) * 0.92, 2)


def test_list_plans_requires_country():
    resp = client.get(f"{BASE}/plans", params={"country_code": "FR"})
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "data": None,
        "error": "Country code and name are required",
        "stats": None,
        "currency": "USD",
        "source": None,
    }


def test_list_plans_rejects_unknown_currency():
    resp = client.get(
        f"{BASE}/plans",
        params={"country_code": "FR", "country_name": "France", "currency": "JPY"},
    )
    assert resp.status_code == 422


def test_list_plans_internal_error(monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(esim_service, "_server_side_filter", explode)
    resp = client.get(f"{BASE}/plans", params={"country_code": "FR", "country_name": "France"})

    assert resp.status_code == 500
    assert resp.json()["success"] is False
    assert resp.json()["error"] == "Internal server error"


def test_country_plans_by_slug_with_filters():
    resp = client.get(f"{BASE}/countries/united-kingdom/plans", params={"days": 30})
    assert resp.status_code == 200
    body = resp.json()

    assert body["success"] is True
    assert body["data"]
    assert all("-GB-" in p["id"] for p in body["data"])
    assert all(int(p["duration"].split()[0]) >= 30 for p in body["data"])


def test_country_plans_unknown_slug():
    resp = client.get(f"{BASE}/countries/atlantis/plans")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Country not found"


def test_view_plans_filters_and_sorts():
    resp = client.post(
        f"{BASE}/plans/view",
        json={
            "plans": VIEW_PLANS,
            "filters": {"max_price": 20, "sort_by": "price", "sort_order": "desc"},
            "currency": "GBP",
        },
    )
    assert resp.status_code == 200
    body = resp.json()

    assert body["total"] == 3
    assert body["matched"] == 2
    assert [p["id"] for p in body["data"]] == ["nomad-FR-0", "airalo-FR-0"]
    assert body["data"][0]["display_price"] == "£11.85"
    assert body["data"][0]["price_per_gb"] == 1.5
    assert body["data"][0]["data_type"] == "5G"


def test_view_plans_rejects_invalid_filters():
    resp = client.post(f"{BASE}/plans/view", json={"plans": VIEW_PLANS, "filters": {"min_rating": 7}})
    assert resp.status_code == 422


def test_compare_plans():
    resp = client.post(f"{BASE}/plans/compare", json={"plans": VIEW_PLANS})
    assert resp.status_code == 200
    body = resp.json()

    assert [p["id"] for p in body["plans"]] == ["airalo-FR-0", "holafly-FR-0", "nomad-FR-0"]
    assert body["cheapest"] == "airalo-FR-0"
    assert body["best_rated"] == "holafly-FR-0"
    assert body["most_data"] == "holafly-FR-0"
    assert body["plans"][1]["price_per_gb"] == 0


def test_compare_rejects_too_many_or_none():
    extra = _plan_payload("ubigi-FR-0", 12.0, "5 GB", "7 days", 4.6)
    too_many = client.post(f"{BASE}/plans/compare", json={"plans": VIEW_PLANS + [extra]})
    assert too_many.status_code == 400
    assert "Maximum 3" in too_many.json()["detail"]

    empty = client.post(f"{BASE}/plans/compare", json={"plans": []})
    assert empty.status_code == 400


def test_search_parses_free_text():
    resp = client.get(f"{BASE}/search", params={"q": "Japan for 10 days under €25"})
    assert resp.status_code == 200
    body = resp.json()

    assert body["country"]["code"] == "JP"
    assert body["country"]["slug"] == "japan"
    assert body["days"] == 10
    assert body["budget"] == 25.0
    assert body["currency"] == "EUR"


def test_search_requires_query():
    assert client.get(f"{BASE}/search", params={"q": ""}).status_code == 422


def test_list_countries():
    everything = client.get(f"{BASE}/countries").json()
    assert len(everything) == 46

    united = client.get(f"{BASE}/countries", params={"q": "united"}).json()
    assert {c["code"] for c in united} == {"US", "GB", "AE"}
    assert {"name": "United States", "code": "US", "flag": "🇺🇸", "slug": "united-states"} in united


def test_list_currencies():
    body = client.get(f"{BASE}/currencies").json()
    assert [c["code"] for c in body] == ["USD", "EUR", "GBP", "CAD", "AUD"]
    assert body[1] == {"code": "EUR", "symbol": "€", "rate": 0.92}
