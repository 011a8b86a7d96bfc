"""Integration tests for API endpoints"""

import pytest
from datetime import datetime
from decimal import Decimal
from fastapi.testclient import TestClient


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def create(client: TestClient, path: str, name: str, amount: str, category: str, occurred_at: str | None = None):
    body = {"name": name, "amount": amount, "category": category}
    if occurred_at is not None:
        body["occurred_at"] = occurred_at
    response = client.post(path, json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


def test_metrics_endpoint(auth_client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = auth_client.get("/metrics")
    assert response.status_code == 200
    assert "bill_tracker_login_attempts_total" in response.text


def test_register_duplicate_email(client: TestClient):
    credentials = {"email": "dup@example.com", "password": "pw"}
    assert client.post("/v1/auth/register", json=credentials).status_code == 201

    response = client.post("/v1/auth/register", json={"email": "DUP@example.com", "password": "other"})
    assert response.status_code == 409


def test_password_limit_counts_bytes(client: TestClient):
    """Test a 72-character password over 72 UTF-8 bytes is refused, not a 500"""
    credentials = {"email": "nino@example.com", "password": "ñ" * 72}

    assert client.post("/v1/auth/register", json=credentials).status_code == 422
    assert client.post("/v1/auth/login", json=credentials).status_code == 422

    # 36 x "ñ" is exactly 72 bytes
    credentials["password"] = "ñ" * 36
    assert client.post("/v1/auth/register", json=credentials).status_code == 201
    assert client.post("/v1/auth/login", json=credentials).status_code == 200


def test_login_wrong_password(client: TestClient):
    client.post("/v1/auth/register", json={"email": "bob@example.com", "password": "right"})

    response = client.post("/v1/auth/login", json={"email": "bob@example.com", "password": "wrong"})
    assert response.status_code == 401

    response = client.post("/v1/auth/login", json={"email": "nobody@example.com", "password": "right"})
    assert response.status_code == 401


@pytest.mark.parametrize("path", ["/v1/incomes", "/v1/expenses", "/v1/credit-card", "/v1/dashboard", "/v1/profile/me"])
def test_requires_session(client: TestClient, path: str):
    """Test every ledger endpoint rejects anonymous requests"""
    assert client.get(path).status_code == 401


def test_profile_and_logout(auth_client: TestClient):
    response = auth_client.get("/v1/profile/me")
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "ana@example.com"
    assert Decimal(data["savings"]) == 0

    assert auth_client.post("/v1/auth/logout").status_code == 200
    assert auth_client.get("/v1/profile/me").status_code == 401


def test_every_v1_endpoint_is_documented(client: TestClient):
    """Test each /v1 route publishes a description in the OpenAPI schema"""
    paths = client.get("/openapi.json").json()["paths"]

    assert paths["/v1/profile/me"]["get"]["description"]
    for path, operations in paths.items():
        if not path.startswith("/v1"):
            continue
        for method, operation in operations.items():
            assert operation.get("description"), f"{method.upper()} {path}"


def test_record_crud_lifecycle(auth_client: TestClient, now: datetime):
    """Test create, read, update and delete of an expense"""
    created = create(auth_client, "/v1/expenses", "Groceries", "45.90", "Food")
    record_id = created["id"]

    assert Decimal(created["amount"]) == Decimal("45.90")
    assert created["category"] == "Food"
    assert parse_ts(created["occurred_at"]) == now  # defaults to the injected clock

    response = auth_client.get(f"/v1/expenses/{record_id}")
    assert response.status_code == 200
    assert response.json()["name"] == "Groceries"

    response = auth_client.put(
        f"/v1/expenses/{record_id}",
        json={"name": "Groceries (market)", "amount": "50", "category": "Leisure"},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Groceries (market)"
    assert Decimal(updated["amount"]) == Decimal("50")
    assert updated["category"] == "Leisure"
    assert parse_ts(updated["occurred_at"]) == now  # unchanged when omitted

    response = auth_client.delete(f"/v1/expenses/{record_id}")
    assert response.status_code == 200
    assert response.json()["message"] == "deleted"

    assert auth_client.get(f"/v1/expenses/{record_id}").status_code == 404
    assert auth_client.delete(f"/v1/expenses/{record_id}").status_code == 404


def test_list_records_newest_first(auth_client: TestClient):
    create(auth_client, "/v1/incomes", "January pay", "1000", "Development", "2024-01-15T17:00:00Z")
    create(auth_client, "/v1/incomes", "February pay", "1100", "Development", "2024-02-15T17:00:00Z")

    response = auth_client.get("/v1/incomes")
    assert response.status_code == 200
    assert [r["name"] for r in response.json()] == ["February pay", "January pay"]

    # Ledgers are separate
    assert auth_client.get("/v1/expenses").json() == []


@pytest.mark.parametrize(
    "body",
    [
        {"name": "Bad", "amount": "-1", "category": "Food"},
        {"name": "Bad", "amount": "NaN", "category": "Food"},
        {"name": "", "amount": "1", "category": "Food"},
        {"name": "Bad", "amount": "1", "category": "Salary"},
    ],
)
def test_create_rejects_invalid_body(auth_client: TestClient, body: dict):
    """Test negative, non-finite, unnamed and unknown-category records are refused"""
    assert auth_client.post("/v1/credit-card", json=body).status_code == 422


def test_income_categories_differ_from_expense(auth_client: TestClient):
    assert auth_client.post("/v1/incomes", json={"name": "x", "amount": "1", "category": "Taxi"}).status_code == 201
    assert auth_client.post("/v1/expenses", json={"name": "x", "amount": "1", "category": "Taxi"}).status_code == 422


def test_records_are_scoped_to_owner(auth_client: TestClient):
    """Test another user can neither see nor change a record"""
    record_id = create(auth_client, "/v1/credit-card", "Fuel up", "60", "Fuel")["id"]
    auth_client.post("/v1/auth/logout")

    other = {"email": "eve@example.com", "password": "pw"}
    auth_client.post("/v1/auth/register", json=other)
    auth_client.post("/v1/auth/login", json=other)

    assert auth_client.get("/v1/credit-card").json() == []
    assert auth_client.get(f"/v1/credit-card/{record_id}").status_code == 404
    response = auth_client.put(
        f"/v1/credit-card/{record_id}", json={"name": "Mine now", "amount": "1", "category": "Fuel"}
    )
    assert response.status_code == 404
    assert auth_client.delete(f"/v1/credit-card/{record_id}").status_code == 404


def test_dashboard_payment_period(auth_client: TestClient):
    """Test dashboard on 2024-03-05: February cycle is due"""
    create(auth_client, "/v1/incomes", "Pay", "1000", "Development", "2024-02-01T17:00:00Z")
    create(auth_client, "/v1/incomes", "Ride", "200", "Taxi", "2024-03-01T17:00:00Z")
    create(auth_client, "/v1/expenses", "Food", "300", "Food", "2024-02-15T17:00:00Z")
    create(auth_client, "/v1/expenses", "Gift", "50", "Family", "2024-03-02T17:00:00Z")
    create(auth_client, "/v1/credit-card", "Dinner", "100", "Food", "2024-03-05T12:00:00Z")
    create(auth_client, "/v1/credit-card", "Fuel", "50", "Fuel", "2024-02-20T17:00:00Z")
    create(auth_client, "/v1/credit-card", "Old", "75", "Fuel", "2024-02-05T17:00:00Z")

    response = auth_client.get("/v1/dashboard")
    assert response.status_code == 200
    data = response.json()

    assert data["cycle"] == {"year": 2024, "month": 2, "is_payment_period": True, "days_remaining": 6}
    totals = {key: Decimal(value) for key, value in data["totals"].items()}
    assert totals == {
        "income": Decimal("1200"),
        "expenses": Decimal("350"),
        "credit_card": Decimal("150"),
        "savings_balance": Decimal("850"),
        "net_balance": Decimal("700"),
    }
    assert Decimal(data["expenses_by_category"]["Family"]) == Decimal("50")
    assert Decimal(data["credit_card_by_category"]["Fuel"]) == Decimal("50")
    assert sum(Decimal(v) for v in data["income_by_category"].values()) == totals["income"]
    assert [r["name"] for r in data["recent_credit_card"]] == ["Dinner", "Fuel", "Old"]
    assert data["filter"] is None


def test_dashboard_period_filter(auth_client: TestClient):
    """Test calendar-month and accounting-cycle filters give different totals"""
    create(auth_client, "/v1/expenses", "Early March", "10", "Food", "2024-03-02T17:00:00Z")
    create(auth_client, "/v1/expenses", "Late February", "20", "Food", "2024-02-20T17:00:00Z")
    create(auth_client, "/v1/expenses", "Early February", "40", "Food", "2024-02-05T17:00:00Z")

    month = auth_client.get("/v1/dashboard", params={"period": "month"}).json()
    assert Decimal(month["totals"]["expenses"]) == Decimal("10")
    assert month["filter"]["period"] == "month"
    assert month["filter"]["anchor"] == "2024-03-05"

    cycle = auth_client.get("/v1/dashboard", params={"period": "cycle"}).json()
    assert Decimal(cycle["totals"]["expenses"]) == Decimal("30")

    feb = auth_client.get("/v1/dashboard", params={"period": "month", "date": "2024-02-10"}).json()
    assert Decimal(feb["totals"]["expenses"]) == Decimal("60")

    ranged = auth_client.get(
        "/v1/dashboard", params={"period": "range", "start": "2024-02-01", "end": "2024-02-05"}
    ).json()
    assert Decimal(ranged["totals"]["expenses"]) == Decimal("40")


def test_dashboard_rejects_bad_filters(auth_client: TestClient):
    assert auth_client.get("/v1/dashboard", params={"period": "decade"}).status_code == 422
    assert auth_client.get("/v1/dashboard", params={"period": "range", "start": "2024-02-01"}).status_code == 422
    response = auth_client.get("/v1/dashboard", params={"period": "range", "start": "2024-03-02", "end": "2024-03-01"})
    assert response.status_code == 422


@pytest.mark.parametrize(
    "params",
    [{"date": "2024-02-10"}, {"start": "2024-02-01"}, {"start": "2024-02-01", "end": "2024-02-05"}],
)
def test_dashboard_filter_dates_require_period(auth_client: TestClient, params: dict):
    """Test filter dates without a period are refused instead of ignored"""
    response = auth_client.get("/v1/dashboard", params=params)
    assert response.status_code == 422
    assert "period" in response.json()["detail"]
