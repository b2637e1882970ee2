"""Valuation service: price a portfolio's holdings for display."""

from decimal import Decimal
from typing import Optional

from portfolio_ledger.core.timezone import now_eastern
from portfolio_ledger.domain.views import PositionValuation, ValuationView
from portfolio_ledger.services.ledger_service import LedgerService
from portfolio_ledger.services.market_data_service import MarketDataService

_CENT = Decimal("0.01")


class ValuationService:
    """
    Display-only portfolio valuation.

    Reads holdings through the ledger service and prices them with cached
    quotes. A holding without a quote keeps its cost figures and leaves the
    market fields empty.
    """

    def __init__(
        self,
        ledger_service: LedgerService,
        market_data_service: MarketDataService,
    ):
        self._ledger = ledger_service
        self._market = market_data_service

    def get_valuation(self, user_id: str, portfolio_id: str) -> ValuationView:
        """
        Value a portfolio at the latest quotes.

        market_value = Σ(shares × last_price) over quoted holdings
        total_value = cash_balance + market_value
        """
        portfolio = self._ledger.get_owned_portfolio(user_id, portfolio_id)
        holdings = self._ledger.get_holdings(user_id, portfolio_id)
        quotes = self._market.get_quotes([h.symbol for h in holdings])

        positions: list[PositionValuation] = []
        market_value = Decimal("0")
        as_of = None

        for holding in holdings:
            cost_basis = (holding.total_shares * holding.average_cost).quantize(_CENT)
            position = PositionValuation(
                symbol=holding.symbol,
                total_shares=holding.total_shares,
                average_cost=holding.average_cost,
                cost_basis=cost_basis,
            )
            quote = quotes.get(holding.symbol)
            if quote:
                position.last_price = quote.last_price
                position.market_value = (holding.total_shares * quote.last_price).quantize(_CENT)
                position.unrealized_pnl = position.market_value - cost_basis
                position.unrealized_pnl_pct = _percent(position.unrealized_pnl, cost_basis)
                market_value += position.market_value
                if as_of is None or quote.as_of > as_of:
                    as_of = quote.as_of
            positions.append(position)

        for position in positions:
            if position.market_value is not None:
                position.weight_pct = _percent(position.market_value, market_value)

        return ValuationView(
            cash_balance=portfolio.cash_balance,
            positions=positions,
            market_value=market_value,
            total_value=portfolio.cash_balance + market_value,
            as_of=as_of or now_eastern(),
        )


def _percent(part: Decimal, whole: Decimal) -> Optional[Decimal]:
    if whole == 0:
        return None
    return (part / whole * 100).quantize(_CENT)
