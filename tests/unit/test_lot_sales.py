"""
Unit tests for the lot-sale recorder.

Tests cover:
- Realized gain summary split by term and by gain vs. loss
- Query filters by sale year and symbol
"""

from datetime import date
from decimal import Decimal

import pytest

from portfolio_ledger.domain.ledger import lot_sales
from portfolio_ledger.domain.models import LotSale


def sale(
    gain: str,
    short_term: bool,
    sale_date: date = date(2024, 3, 1),
    symbol: str = "AAPL",
    sale_id: str = "s",
) -> LotSale:
    return LotSale(
        sale_id=sale_id,
        lot_id="lot",
        sell_txn_id="sell",
        symbol=symbol,
        shares_sold=Decimal("1"),
        sale_price=Decimal("10"),
        realized_gain=Decimal(gain),
        is_short_term=short_term,
        sale_date=sale_date,
    )


@pytest.fixture
def mixed_sales() -> list[LotSale]:
    return [
        sale("100", True, date(2024, 3, 1), "AAPL", "a"),
        sale("-40", True, date(2024, 5, 1), "MSFT", "b"),
        sale("250", False, date(2023, 7, 1), "AAPL", "c"),
        sale("-10", False, date(2024, 8, 1), "AAPL", "d"),
    ]


class TestSummarize:
    """Tests for realized gain aggregation."""

    def test_summary_splits_terms_and_signs(self, mixed_sales):
        """
        GIVEN short-term +100/-40 and long-term +250/-10
        WHEN the records are summarized
        THEN each term reports its gain, loss and total
        """
        summary = lot_sales.summarize(mixed_sales)

        assert summary.total_realized_gain == Decimal("300")
        assert summary.short_term_gain == Decimal("100")
        assert summary.short_term_loss == Decimal("-40")
        assert summary.short_term_total == Decimal("60")
        assert summary.long_term_gain == Decimal("250")
        assert summary.long_term_loss == Decimal("-10")
        assert summary.long_term_total == Decimal("240")

    def test_empty_summary_is_zero(self):
        summary = lot_sales.summarize([])

        assert summary.total_realized_gain == Decimal("0")
        assert summary.short_term_loss == Decimal("0")


class TestQuery:
    """Tests for filtering lot sales."""

    def test_filter_by_year(self, mixed_sales):
        report = lot_sales.query(mixed_sales, year=2024)

        assert [s.sale_id for s in report.records] == ["d", "b", "a"]
        assert report.summary.total_realized_gain == Decimal("50")

    def test_filter_by_symbol_is_case_insensitive(self, mixed_sales):
        report = lot_sales.query(mixed_sales, symbol="aapl")

        assert {s.sale_id for s in report.records} == {"a", "c", "d"}
        assert report.summary.long_term_total == Decimal("240")

    def test_filter_by_year_and_symbol(self, mixed_sales):
        report = lot_sales.query(mixed_sales, year=2023, symbol="AAPL")

        assert [s.sale_id for s in report.records] == ["c"]

    def test_no_filters_returns_newest_first(self, mixed_sales):
        report = lot_sales.query(mixed_sales)

        assert [s.sale_id for s in report.records] == ["d", "b", "a", "c"]
