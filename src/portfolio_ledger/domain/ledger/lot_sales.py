"""Lot-sale recorder: append and query realized gain records."""

from decimal import Decimal
from typing import Iterable, Optional

from portfolio_ledger.domain.ledger.state import LedgerState
from portfolio_ledger.domain.models import LotSale
from portfolio_ledger.domain.views import RealizedGainsReport, RealizedGainsSummary


def record_sale(state: LedgerState, sale: LotSale) -> LotSale:
    """Append a lot sale. No other mutation happens here."""
    state.lot_sales.append(sale)
    return sale


def summarize(records: Iterable[LotSale]) -> RealizedGainsSummary:
    """Total realized gains, split by term and by gain vs. loss."""
    summary = RealizedGainsSummary()
    for sale in records:
        gain = sale.realized_gain
        summary.total_realized_gain += gain
        if sale.is_short_term:
            summary.short_term_total += gain
            if gain >= 0:
                summary.short_term_gain += gain
            else:
                summary.short_term_loss += gain
        else:
            summary.long_term_total += gain
            if gain >= 0:
                summary.long_term_gain += gain
            else:
                summary.long_term_loss += gain
    return summary


def query(
    records: Iterable[LotSale],
    year: Optional[int] = None,
    symbol: Optional[str] = None,
) -> RealizedGainsReport:
    """Filter lot sales by sale year and symbol, newest sale first."""
    matched = [
        sale
        for sale in records
        if (year is None or sale.sale_date.year == year)
        and (symbol is None or sale.symbol == symbol.upper())
    ]
    matched.sort(key=lambda sale: sale.sale_date, reverse=True)
    return RealizedGainsReport(records=matched, summary=summarize(matched))


def total_shares_sold(records: Iterable[LotSale]) -> Decimal:
    return sum((sale.shares_sold for sale in records), Decimal("0"))
