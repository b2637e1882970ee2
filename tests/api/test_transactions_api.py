"""
API tests for transaction endpoints.

Tests cover:
- Apply buy, sell, dividend and split transactions
- Amend and remove transactions
- Paged journal listing
- Validation, precondition and conflict status codes
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from tests.conftest import OTHER_USER_ID, user_headers


# =============================================================================
# HELPER FIXTURES
# =============================================================================


@pytest.fixture
def portfolio(client: TestClient) -> dict:
    response = client.post(
        "/portfolios",
        json={"name": "Brokerage", "cash_balance": "10000"},
        headers=user_headers(),
    )
    return response.json()


@pytest.fixture
def txn_url(portfolio: dict) -> str:
    return f"/portfolios/{portfolio['portfolio_id']}/transactions"


def _post(client: TestClient, url: str, **payload):
    return client.post(url, json=payload, headers=user_headers())


# =============================================================================
# APPLY TESTS
# =============================================================================


class TestApplyTransactionAPI:
    """Tests for POST /portfolios/{id}/transactions."""

    def test_apply_buy(self, client: TestClient, txn_url: str):
        """
        GIVEN a portfolio with $10,000
        WHEN I POST a BUY of 10 AAPL @ $185 with $4.95 fees
        THEN response is 201 with the stored transaction
        """
        response = _post(
            client,
            txn_url,
            symbol="aapl",
            txn_type="buy",
            shares="10",
            price="185.00",
            fees="4.95",
            executed_at="2024-01-15T10:30:00",
            note="Initial purchase",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["symbol"] == "AAPL"
        assert data["txn_type"] == "buy"
        assert Decimal(data["gross_amount"]) == Decimal("1850")
        assert data["applied_seq"] == 1
        assert data["note"] == "Initial purchase"
        assert data["executed_at"].startswith("2024-01-15T10:30:00")

    def test_sell_more_than_held_is_400(self, client: TestClient, txn_url: str):
        _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="5", price="100")

        response = _post(client, txn_url, symbol="AAPL", txn_type="sell", shares="6", price="100")

        assert response.status_code == 400
        assert response.json()["error"] == "INSUFFICIENT_SHARES"

    def test_buy_exceeding_cash_is_400(self, client: TestClient, txn_url: str):
        response = _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="100", price="101")

        assert response.status_code == 400
        assert response.json()["error"] == "INSUFFICIENT_FUNDS"

    def test_split_without_price(self, client: TestClient, txn_url: str):
        _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="10", price="100")

        response = _post(client, txn_url, symbol="AAPL", txn_type="split", shares="2")

        assert response.status_code == 201
        assert Decimal(response.json()["price"]) == Decimal("0")

    def test_dividend_credits_cash(self, client: TestClient, portfolio: dict, txn_url: str):
        response = _post(client, txn_url, symbol="MSFT", txn_type="dividend", shares="10", price="0.75")

        assert response.status_code == 201
        detail = client.get(f"/portfolios/{portfolio['portfolio_id']}", headers=user_headers()).json()
        assert Decimal(detail["portfolio"]["cash_balance"]) == Decimal("10007.50")

    @pytest.mark.parametrize(
        "payload",
        [
            {"symbol": "AAPL", "txn_type": "buy", "shares": "0", "price": "10"},
            {"symbol": "AAPL", "txn_type": "buy", "shares": "1", "price": "-1"},
            {"symbol": "AAPL", "txn_type": "transfer", "shares": "1", "price": "1"},
            {"symbol": "", "txn_type": "buy", "shares": "1", "price": "1"},
        ],
    )
    def test_malformed_input_is_422(self, client: TestClient, txn_url: str, payload: dict):
        response = client.post(txn_url, json=payload, headers=user_headers())

        assert response.status_code == 422

    def test_buy_without_price_is_400(self, client: TestClient, txn_url: str):
        response = _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="1")

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_other_users_portfolio_is_404(self, client: TestClient, txn_url: str):
        response = client.post(
            txn_url,
            json={"symbol": "AAPL", "txn_type": "buy", "shares": "1", "price": "1"},
            headers=user_headers(OTHER_USER_ID),
        )

        assert response.status_code == 404


# =============================================================================
# AMEND / REMOVE TESTS
# =============================================================================


class TestAmendRemoveAPI:
    """Tests for PUT and DELETE /portfolios/{id}/transactions/{txn_id}."""

    def test_amend_price(self, client: TestClient, txn_url: str):
        buy = _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="10", price="100").json()

        response = client.put(f"{txn_url}/{buy['txn_id']}", json={"price": "90"}, headers=user_headers())

        assert response.status_code == 200
        assert Decimal(response.json()["price"]) == Decimal("90")
        assert response.json()["updated_at"] is not None

    def test_amend_buy_consumed_by_sell_is_409(self, client: TestClient, txn_url: str):
        """
        GIVEN a buy partially consumed by a later sell
        WHEN I amend the buy
        THEN response is 409 CONFLICT
        """
        buy = _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="10", price="100").json()
        _post(client, txn_url, symbol="AAPL", txn_type="sell", shares="3", price="120")

        response = client.put(f"{txn_url}/{buy['txn_id']}", json={"shares": "12"}, headers=user_headers())

        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_amend_buy_before_split_is_409(self, client: TestClient, txn_url: str):
        """
        GIVEN a buy of 10 @ $20 followed by a 2:1 split
        WHEN I amend the buy's fees
        THEN response is 409 and the holding keeps 20 shares
        """
        buy = _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="10", price="20").json()
        _post(client, txn_url, symbol="AAPL", txn_type="split", shares="2")

        response = client.put(f"{txn_url}/{buy['txn_id']}", json={"fees": "1"}, headers=user_headers())

        assert response.status_code == 409
        holdings_url = txn_url.replace("/transactions", "/holdings")
        holdings = client.get(holdings_url, headers=user_headers()).json()
        assert Decimal(holdings[0]["total_shares"]) == Decimal("20")

    def test_remove_transaction(self, client: TestClient, txn_url: str):
        buy = _post(client, txn_url, symbol="AAPL", txn_type="buy", shares="10", price="100").json()

        response = client.delete(f"{txn_url}/{buy['txn_id']}", headers=user_headers())

        assert response.status_code == 204
        assert client.get(f"{txn_url}/{buy['txn_id']}", headers=user_headers()).status_code == 404

    def test_remove_missing_is_404(self, client: TestClient, txn_url: str):
        response = client.delete(f"{txn_url}/missing", headers=user_headers())

        assert response.status_code == 404


# =============================================================================
# LIST TESTS
# =============================================================================


class TestListTransactionsAPI:
    """Tests for GET /portfolios/{id}/transactions."""

    def test_list_pages_newest_first(self, client: TestClient, txn_url: str):
        for day in (1, 2, 3):
            _post(
                client,
                txn_url,
                symbol="SPY",
                txn_type="dividend",
                shares="1",
                price="1",
                executed_at=f"2024-03-0{day}T10:00:00",
            )

        response = client.get(txn_url, params={"limit": 2, "offset": 0}, headers=user_headers())

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert data["limit"] == 2
        assert [t["executed_at"][:10] for t in data["transactions"]] == ["2024-03-03", "2024-03-02"]

    def test_limit_out_of_range_is_422(self, client: TestClient, txn_url: str):
        response = client.get(txn_url, params={"limit": 501}, headers=user_headers())

        assert response.status_code == 422
