"""Integration tests for API endpoints"""

import pytest
from datetime import date, datetime
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from rental_ledger.infrastructure.database.models import CustomerRow, VehicleRow, RentalRow, PaymentRow


@pytest.fixture
def seeded(db: Session) -> Session:
    """
    Two customers, two vehicles, four rentals (one soft-deleted).

    Amounts in kuruş:
    - r_owing:   30 days × 500 + 600 km + 100 cleaning + 50 toll, 100 upfront → 15650 owed
    - r_settled: 2 days × 100, settled by a ledger payment 30 days after end
    - r_cross:   Jan 7 - Feb 5, 500/day + 600 km, fully paid up front
    - r_deleted: soft-deleted, owes 999
    """
    db.add_all(
        [
            CustomerRow(id="alice", full_name="Alice Demir", phone="555 0101"),
            CustomerRow(id="bob", full_name="Bob Kaya"),
            VehicleRow(id="v1", plate="34 ABC 123", status="RENTED", active=True),
            VehicleRow(id="v2", plate="06 XYZ 789", status="IDLE", active=True),
        ]
    )
    db.flush()
    db.add_all(
        [
            RentalRow(
                id="r_owing",
                vehicle_id="v1",
                customer_id="alice",
                start_date=date(2025, 4, 1),
                end_date=date(2025, 4, 30),
                days=30,
                daily_price=50_000,
                km_diff=60_000,
                cleaning=10_000,
                hgs=5_000,
                upfront=10_000,
                status="COMPLETED",
                created_at=datetime(2025, 4, 1, 10, 0),
            ),
            RentalRow(
                id="r_settled",
                vehicle_id="v2",
                customer_id="alice",
                start_date=date(2025, 3, 9),
                end_date=date(2025, 3, 10),
                days=2,
                daily_price=10_000,
                status="COMPLETED",
                created_at=datetime(2025, 3, 9, 10, 0),
            ),
            RentalRow(
                id="r_cross",
                vehicle_id="v1",
                customer_id="bob",
                start_date=date(2025, 1, 7),
                end_date=date(2025, 2, 5),
                days=30,
                daily_price=50_000,
                km_diff=60_000,
                upfront=1_560_000,
                status="COMPLETED",
                created_at=datetime(2025, 1, 7, 10, 0),
            ),
            RentalRow(
                id="r_deleted",
                vehicle_id="v2",
                customer_id="bob",
                start_date=date(2025, 5, 1),
                end_date=date(2025, 5, 1),
                days=1,
                daily_price=999,
                status="CANCELLED",
                deleted=True,
                created_at=datetime(2025, 5, 1, 10, 0),
            ),
        ]
    )
    db.flush()
    db.add(
        PaymentRow(
            id="p1",
            rental_id="r_settled",
            amount=20_000,
            method="TRANSFER",
            paid_at=datetime(2025, 4, 9, 15, 0),
        )
    )
    db.commit()
    return db


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "rental_ledger_report_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_rental_balance(client: TestClient, seeded: Session):
    """Test GET /v1/rentals/{rental_id}/balance for a partly paid rental"""
    response = client.get("/v1/rentals/r_owing/balance", params={"as_of": "2025-06-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["charges"]["total_due_cents"] == 1_575_000
    assert data["payments"]["installment_total_cents"] == 10_000
    assert data["payments"]["ledger_total_cents"] == 0
    assert data["balance_cents"] == 1_565_000
    assert data["payment_status"] == "PARTIAL"
    assert data["days_overdue"] == 32
    assert data["risk_tier"] == "CRITICAL"


def test_rental_balance_paid_through_ledger(client: TestClient, seeded: Session):
    response = client.get("/v1/rentals/r_settled/balance", params={"as_of": "2025-06-01"})

    data = response.json()
    assert data["payment_status"] == "PAID"
    assert data["balance_cents"] == 0
    assert data["risk_tier"] == "LOW"
    assert data["settled_at"].startswith("2025-04-09")


def test_rental_balance_not_found(client: TestClient, seeded: Session):
    assert client.get("/v1/rentals/missing/balance").status_code == 404
    assert client.get("/v1/rentals/r_deleted/balance").status_code == 404


def test_customer_risk(client: TestClient, seeded: Session):
    """
    Alice: 15650 owed on a CRITICAL rental, other rental settled 30 days late
    → 30 + 20 + 20 + 10 = 80
    """
    response = client.get("/v1/customers/alice/risk", params={"as_of": "2025-06-01"})

    assert response.status_code == 200
    data = response.json()
    assert data["customer_name"] == "Alice Demir"
    assert data["contract_count"] == 2
    assert data["current_debt_cents"] == 1_565_000
    assert data["avg_payment_delay_days"] == 30.0
    assert data["critical_contracts"] == 1
    assert data["risk_score"] == 80


def test_customer_risk_not_found(client: TestClient, seeded: Session):
    assert client.get("/v1/customers/nobody/risk").status_code == 404


def test_monthly_revenue(client: TestClient, seeded: Session):
    """Test cross-month rental splits 25/5 days between January and February"""
    response = client.get("/v1/reports/revenue/monthly", params={"year": 2025, "vehicle_id": "v1"})

    assert response.status_code == 200
    data = response.json()
    totals = {m["month"]: m["revenue_cents"] for m in data["totals"]}
    assert len(data["totals"]) == 12
    assert totals[1] == 25 * 52_000
    assert totals[2] == 5 * 52_000
    assert totals[4] == 50_000 * 30 + 60_000  # r_owing, April only
    assert all(m["plate"] == "34 ABC 123" for m in data["vehicles"])


def test_monthly_revenue_rejects_inverted_span(client: TestClient, seeded: Session):
    seeded.add(
        RentalRow(
            id="r_bad",
            vehicle_id="v2",
            customer_id="bob",
            start_date=date(2025, 6, 10),
            end_date=date(2025, 6, 9),
            days=1,
            daily_price=1_000,
            status="COMPLETED",
            created_at=datetime(2025, 6, 10),
        )
    )
    seeded.commit()

    response = client.get("/v1/reports/revenue/monthly", params={"year": 2025})

    assert response.status_code == 422
    assert "r_bad" in response.json()["detail"]


def test_debtors_report(client: TestClient, seeded: Session):
    response = client.get("/v1/reports/debtors", params={"as_of": "2025-06-01"})

    assert response.status_code == 200
    data = response.json()
    assert [d["customer_id"] for d in data["debtors"]] == ["alice"]
    assert data["total_debt_cents"] == 1_565_000


def test_vehicle_revenue_report(client: TestClient, seeded: Session):
    response = client.get("/v1/reports/vehicles/revenue")

    assert response.status_code == 200
    vehicles = {v["vehicle_id"]: v for v in response.json()["vehicles"]}
    assert vehicles["v1"]["revenue_cents"] == 2 * (30 * 50_000 + 60_000)
    assert vehicles["v1"]["rental_count"] == 2
    assert vehicles["v2"]["revenue_cents"] == 20_000  # deleted rental excluded


def test_monthly_collections(client: TestClient, seeded: Session):
    """
    January: 25 days of r_cross plus its km fee, fully paid.
    April: r_owing bills 15750.00 and only 100.00 of it is paid.
    """
    response = client.get("/v1/reports/collections/monthly", params={"year": 2025})

    assert response.status_code == 200
    months = response.json()["months"]
    assert len(months) == 12
    assert months[0] == {"year": 2025, "month": 1, "billed_cents": 1_310_000, "collected_cents": 1_310_000, "outstanding_cents": 0}
    assert months[3]["billed_cents"] == 1_575_000
    assert months[3]["collected_cents"] == 10_000
    assert months[3]["outstanding_cents"] == 1_565_000


def test_vehicle_income_report(client: TestClient, seeded: Session):
    response = client.get("/v1/reports/vehicles/income")

    assert response.status_code == 200
    vehicles = response.json()["vehicles"]
    assert [v["vehicle_id"] for v in vehicles] == ["v1", "v2"]
    assert vehicles[0]["billed_cents"] == 2 * 1_560_000
    assert vehicles[0]["collected_cents"] == round(1_560_000 + 1_560_000 * 10_000 / 1_575_000)
    assert vehicles[1]["collected_cents"] == 20_000
    assert vehicles[1]["outstanding_cents"] == 0


def test_dashboard(client: TestClient, seeded: Session):
    response = client.get("/v1/reports/dashboard", params={"year": 2025, "month": 4})

    assert response.status_code == 200
    data = response.json()
    assert (data["total_vehicles"], data["rented"], data["idle"]) == (2, 1, 1)
    assert data["billed_cents"] == 1_575_000
    assert data["collected_cents"] == 10_000
    assert data["outstanding_cents"] == 1_565_000
    assert data["vehicle_profit_cents"] == 1_560_000
