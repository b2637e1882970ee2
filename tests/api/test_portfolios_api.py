"""
API tests for portfolio endpoints.

Tests cover:
- Create, list, view, update and delete portfolios
- Caller identity from the X-User-Id header
- Error status codes
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tests.conftest import OTHER_USER_ID, user_headers


@pytest.fixture
def portfolio(client: TestClient) -> dict:
    """Create the caller's default portfolio with $10,000."""
    response = client.post(
        "/portfolios",
        json={"name": "Brokerage", "cash_balance": "10000"},
        headers=user_headers(),
    )
    return response.json()


# =============================================================================
# CREATE / LIST TESTS
# =============================================================================


class TestCreatePortfolioAPI:
    """Tests for POST /portfolios."""

    def test_create_first_portfolio_is_default(self, client: TestClient):
        """
        GIVEN a user with no portfolios
        WHEN I POST /portfolios
        THEN response is 201 and the portfolio is the default
        """
        response = client.post(
            "/portfolios",
            json={"name": "Brokerage", "description": "Taxable", "cash_balance": "2500.50"},
            headers=user_headers(),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Brokerage"
        assert data["is_default"] is True
        assert Decimal(data["cash_balance"]) == Decimal("2500.50")

    def test_missing_user_header_is_401(self, client: TestClient):
        response = client.post("/portfolios", json={"name": "Brokerage"})

        assert response.status_code == 401

    def test_negative_cash_is_422(self, client: TestClient):
        response = client.post(
            "/portfolios",
            json={"name": "Brokerage", "cash_balance": "-1"},
            headers=user_headers(),
        )

        assert response.status_code == 422

    def test_blank_name_is_400(self, client: TestClient):
        response = client.post("/portfolios", json={"name": "   "}, headers=user_headers())

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"


class TestListPortfoliosAPI:
    """Tests for GET /portfolios."""

    def test_list_returns_summaries(self, client: TestClient, portfolio: dict):
        client.post(
            f"/portfolios/{portfolio['portfolio_id']}/transactions",
            json={"symbol": "AAPL", "txn_type": "buy", "shares": "10", "price": "150"},
            headers=user_headers(),
        )

        response = client.get("/portfolios", headers=user_headers())

        assert response.status_code == 200
        summaries = response.json()
        assert len(summaries) == 1
        assert summaries[0]["portfolio"]["portfolio_id"] == portfolio["portfolio_id"]
        assert summaries[0]["holdings_count"] == 1
        assert Decimal(summaries[0]["total_invested"]) == Decimal("1500")

    def test_list_is_scoped_to_caller(self, client: TestClient, portfolio: dict):
        response = client.get("/portfolios", headers=user_headers(OTHER_USER_ID))

        assert response.status_code == 200
        assert response.json() == []


# =============================================================================
# DETAIL / UPDATE / DELETE TESTS
# =============================================================================


class TestPortfolioDetailAPI:
    """Tests for GET/PUT/DELETE /portfolios/{id}."""

    def test_get_detail(self, client: TestClient, portfolio: dict):
        pid = portfolio["portfolio_id"]
        client.post(
            f"/portfolios/{pid}/transactions",
            json={"symbol": "MSFT", "txn_type": "buy", "shares": "2", "price": "300"},
            headers=user_headers(),
        )

        response = client.get(f"/portfolios/{pid}", headers=user_headers())

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["portfolio"]["cash_balance"]) == Decimal("9400")
        assert [h["symbol"] for h in data["holdings"]] == ["MSFT"]
        assert len(data["recent_transactions"]) == 1

    def test_other_user_gets_404(self, client: TestClient, portfolio: dict):
        response = client.get(
            f"/portfolios/{portfolio['portfolio_id']}",
            headers=user_headers(OTHER_USER_ID),
        )

        assert response.status_code == 404
        assert response.json()["error"] == "NOT_FOUND"

    def test_update_cash_balance(self, client: TestClient, portfolio: dict):
        response = client.put(
            f"/portfolios/{portfolio['portfolio_id']}",
            json={"cash_balance": "12000", "name": "Main"},
            headers=user_headers(),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Main"
        assert Decimal(data["cash_balance"]) == Decimal("12000")

    def test_delete_default_is_400(self, client: TestClient, portfolio: dict):
        response = client.delete(f"/portfolios/{portfolio['portfolio_id']}", headers=user_headers())

        assert response.status_code == 400

    def test_delete_secondary_portfolio(self, client: TestClient, portfolio: dict):
        """
        GIVEN a default portfolio and a second one with a holding
        WHEN I DELETE the second one
        THEN response is 204 and it is gone
        """
        second = client.post("/portfolios", json={"name": "Trading", "cash_balance": "500"}, headers=user_headers()).json()
        client.post(
            f"/portfolios/{second['portfolio_id']}/transactions",
            json={"symbol": "AAPL", "txn_type": "buy", "shares": "1", "price": "100"},
            headers=user_headers(),
        )

        response = client.delete(f"/portfolios/{second['portfolio_id']}", headers=user_headers())

        assert response.status_code == 204
        assert client.get(f"/portfolios/{second['portfolio_id']}", headers=user_headers()).status_code == 404
        assert len(client.get("/portfolios", headers=user_headers()).json()) == 1
