"""Integration tests for the API reading from the back-office REST API"""

import pytest
import httpx
from typing import Callable
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from rental_ledger.api import dependencies
from rental_ledger.api.dependencies import get_backoffice_client
from rental_ledger.api.main import create_app
from rental_ledger.config import settings
from rental_ledger.infrastructure.clients.backoffice import BackOfficeClient

BASE_URL = "http://backoffice.test/api"

CUSTOMERS = [{"id": f"c{i}", "fullName": f"Customer {i}", "phone": None} for i in range(5)]


def _rental(rental_id: str, customer_id: str, **overrides) -> dict:
    """Ten days at 500.00 a day, nothing paid; money in lira"""
    rental = {
        "id": rental_id,
        "vehicleId": "v1",
        "customerId": customer_id,
        "startDate": "2025-03-01T00:00:00.000Z",
        "endDate": "2025-03-10T00:00:00.000Z",
        "days": 10,
        "dailyPrice": 500,
        "status": "COMPLETED",
        "createdAt": "2025-03-01T09:00:00.000Z",
        "payments": [],
    }
    rental.update(overrides)
    return rental


def back_office(request: httpx.Request) -> httpx.Response:
    """
    Back office with five customers and a customer list that honours
    `limit` but not `page`, like the real listing route.
    """
    path = request.url.path.removeprefix("/api")
    if path == "/rentals":
        rentals = [_rental("r1", "c1"), _rental("r4", "c4")]
        return httpx.Response(200, json={"data": rentals, "pagination": {"page": 1, "pages": 1}})
    if path == "/customers":
        limit = int(request.url.params.get("limit", 50))
        return httpx.Response(200, json={"success": True, "data": CUSTOMERS[:limit]})
    if path.startswith("/customers/"):
        customer_id = path.rsplit("/", 1)[-1]
        match = [c for c in CUSTOMERS if c["id"] == customer_id]
        if not match:
            return httpx.Response(404, json={"success": False})
        return httpx.Response(200, json={"success": True, "data": match[0]})
    if path == "/vehicles":
        return httpx.Response(200, json=[{"id": "v1", "plate": "34 ABC 123", "status": "RENTED", "active": True}])
    return httpx.Response(404)


def unavailable(request: httpx.Request) -> httpx.Response:
    return httpx.Response(502)


@pytest.fixture
def api(monkeypatch) -> Callable[..., TestClient]:
    """Build a TestClient whose snapshots come from a mocked back office"""

    def no_database():
        raise AssertionError("database session opened in back-office mode")

    monkeypatch.setattr(settings, "snapshot_source", "backoffice")
    monkeypatch.setattr(dependencies, "SessionLocal", no_database)

    def _build(handler) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_backoffice_client] = lambda: BackOfficeClient(
            base_url=BASE_URL,
            page_size=2,
            currency_unit="major",
            transport=httpx.MockTransport(handler),
        )
        return TestClient(app)

    return _build


def test_customer_past_first_directory_page_is_found(api):
    """Test c4 sits beyond the capped listing and is still scored"""
    response = api(back_office).get("/v1/customers/c4/risk", params={"as_of": "2025-06-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["customer_name"] == "Customer 4"
    assert data["current_debt_cents"] == 500_000
    assert data["critical_contracts"] == 1  # 83 days overdue
    assert data["risk_score"] == 40


def test_unknown_customer_is_404(api):
    assert api(back_office).get("/v1/customers/c9/risk").status_code == 404


def test_debtors_named_beyond_directory_limit(api):
    response = api(back_office).get("/v1/reports/debtors", params={"as_of": "2025-06-01"})

    assert response.status_code == 200
    names = {d["customer_id"]: d["customer_name"] for d in response.json()["debtors"]}
    assert names == {"c1": "Customer 1", "c4": "Customer 4"}


def test_rental_balance_from_back_office(api):
    response = api(back_office).get("/v1/rentals/r4/balance", params={"as_of": "2025-06-01"})

    assert response.status_code == 200
    assert response.json()["balance_cents"] == 500_000


@pytest.mark.parametrize(
    "path",
    [
        "/v1/reports/debtors",
        "/v1/reports/revenue/monthly?year=2025",
        "/v1/reports/collections/monthly?year=2025",
        "/v1/reports/dashboard?year=2025&month=3",
        "/v1/reports/vehicles/revenue",
        "/v1/reports/vehicles/income",
        "/v1/customers/c1/risk",
        "/v1/rentals/r1/balance",
    ],
)
def test_back_office_failure_is_503(api, path):
    """Test a failing back office maps to 503 and is counted"""
    before = REGISTRY.get_sample_value("snapshot_fetch_failures_total") or 0.0

    response = api(unavailable).get(path)

    assert response.status_code == 503
    assert response.json()["detail"] == "Back-office data unavailable"
    assert REGISTRY.get_sample_value("snapshot_fetch_failures_total") == before + 1
