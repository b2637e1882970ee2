"""
API tests for derived ledger endpoints.

Tests cover:
- Holdings and tax lots
- Realized gains (lot sales) with filters
- Display-only valuation
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tests.conftest import OTHER_USER_ID, user_headers


@pytest.fixture
def pid(client: TestClient) -> str:
    """Portfolio with two AAPL lots (10 @ $10, 10 @ $20) and a 15-share sell @ $15."""
    portfolio = client.post(
        "/portfolios",
        json={"name": "Brokerage", "cash_balance": "10000"},
        headers=user_headers(),
    ).json()
    url = f"/portfolios/{portfolio['portfolio_id']}/transactions"
    for payload in (
        {"symbol": "AAPL", "txn_type": "buy", "shares": "10", "price": "10", "executed_at": "2023-01-10T10:00:00"},
        {"symbol": "AAPL", "txn_type": "buy", "shares": "10", "price": "20", "executed_at": "2024-02-10T10:00:00"},
        {"symbol": "AAPL", "txn_type": "sell", "shares": "15", "price": "15", "executed_at": "2024-03-10T10:00:00"},
    ):
        response = client.post(url, json=payload, headers=user_headers())
        assert response.status_code == 201
    return portfolio["portfolio_id"]


class TestHoldingsAPI:
    """Tests for GET /portfolios/{id}/holdings and tax lots."""

    def test_holdings(self, client: TestClient, pid: str):
        response = client.get(f"/portfolios/{pid}/holdings", headers=user_headers())

        assert response.status_code == 200
        holdings = response.json()
        assert len(holdings) == 1
        assert holdings[0]["symbol"] == "AAPL"
        assert Decimal(holdings[0]["total_shares"]) == Decimal("5")
        assert Decimal(holdings[0]["average_cost"]) == Decimal("15")

    def test_tax_lots_open_only(self, client: TestClient, pid: str):
        """
        GIVEN lot A fully sold and lot B with 5 shares left
        WHEN I GET the AAPL tax lots
        THEN only lot B is returned unless include_closed is set
        """
        url = f"/portfolios/{pid}/holdings/aapl/tax-lots"

        open_lots = client.get(url, headers=user_headers()).json()
        all_lots = client.get(url, params={"include_closed": True}, headers=user_headers()).json()

        assert len(open_lots) == 1
        assert Decimal(open_lots[0]["shares_remaining"]) == Decimal("5")
        assert Decimal(open_lots[0]["cost_basis"]) == Decimal("100")
        assert [Decimal(lot["cost_per_share"]) for lot in all_lots] == [Decimal("10"), Decimal("20")]

    def test_other_user_gets_404(self, client: TestClient, pid: str):
        response = client.get(f"/portfolios/{pid}/holdings", headers=user_headers(OTHER_USER_ID))

        assert response.status_code == 404


class TestRealizedGainsAPI:
    """Tests for GET /portfolios/{id}/lot-sales."""

    def test_realized_gains_summary(self, client: TestClient, pid: str):
        """
        GIVEN a sell that consumed a long-term lot at a gain and a short-term lot at a loss
        WHEN I GET lot sales
        THEN the summary separates long-term gain from short-term loss
        """
        response = client.get(f"/portfolios/{pid}/lot-sales", headers=user_headers())

        assert response.status_code == 200
        data = response.json()
        assert len(data["records"]) == 2
        summary = {k: Decimal(v) for k, v in data["summary"].items()}
        assert summary["long_term_gain"] == Decimal("50")
        assert summary["short_term_loss"] == Decimal("-25")
        assert summary["total_realized_gain"] == Decimal("25")

    def test_year_filter(self, client: TestClient, pid: str):
        response = client.get(f"/portfolios/{pid}/lot-sales", params={"year": 2023}, headers=user_headers())

        assert response.status_code == 200
        assert response.json()["records"] == []

    def test_symbol_filter(self, client: TestClient, pid: str):
        response = client.get(f"/portfolios/{pid}/lot-sales", params={"symbol": "msft"}, headers=user_headers())

        assert response.json()["records"] == []


class TestValuationAPI:
    """Tests for GET /portfolios/{id}/valuation."""

    def test_valuation(self, client: TestClient, pid: str):
        """
        GIVEN 5 AAPL shares and $9,925 cash
        WHEN I GET the valuation at AAPL $185.50
        THEN market value is $927.50
        """
        response = client.get(f"/portfolios/{pid}/valuation", headers=user_headers())

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["cash_balance"]) == Decimal("9925")
        assert Decimal(data["market_value"]) == Decimal("927.50")
        assert Decimal(data["total_value"]) == Decimal("10852.50")
        assert Decimal(data["positions"][0]["last_price"]) == Decimal("185.50")


class TestHealthAPI:
    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
