"""Stub quote provider for offline/testing use."""

import random
from decimal import Decimal
from typing import Optional

from portfolio_ledger.core.timezone import now_eastern
from portfolio_ledger.domain.views import Quote

# Deterministic fake prices for common symbols
_STUB_PRICES: dict[str, tuple[Decimal, Decimal]] = {
    "AAPL": (Decimal("185.50"), Decimal("184.25")),
    "MSFT": (Decimal("378.25"), Decimal("376.80")),
    "NVDA": (Decimal("485.25"), Decimal("482.50")),
    "SPY": (Decimal("485.25"), Decimal("484.10")),
    "VTI": (Decimal("252.30"), Decimal("251.80")),
}


class StubQuoteProvider:
    """
    Offline provider: fixed prices for a few symbols, seeded random ones otherwise.

    Explicit prices passed to the constructor take precedence.
    """

    def __init__(self, prices: Optional[dict[str, Decimal]] = None, seed: int = 42):
        self._prices = {s.upper(): Decimal(str(p)) for s, p in (prices or {}).items()}
        self._rng = random.Random(seed)

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """Return stub quotes for requested symbols."""
        as_of = now_eastern()
        result: dict[str, Quote] = {}

        for symbol in symbols:
            upper_symbol = symbol.upper()
            if upper_symbol in self._prices:
                last_price = prev_close = self._prices[upper_symbol]
            elif upper_symbol in _STUB_PRICES:
                last_price, prev_close = _STUB_PRICES[upper_symbol]
            else:
                base_price = Decimal(str(50 + self._rng.random() * 200))
                last_price = base_price.quantize(Decimal("0.01"))
                change_pct = Decimal(str((self._rng.random() - 0.5) * 0.04))
                prev_close = (last_price / (1 + change_pct)).quantize(Decimal("0.01"))

            result[upper_symbol] = Quote(
                symbol=upper_symbol,
                last_price=last_price,
                prev_close=prev_close,
                as_of=as_of,
            )

        return result
