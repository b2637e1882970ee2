"""Quote provider protocol."""

from typing import Protocol

from portfolio_ledger.domain.views import Quote


class QuoteProvider(Protocol):
    """
    Protocol for quote providers used by display-only valuation.

    Ledger correctness never depends on a provider.
    """

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for multiple symbols.

        Returns dict mapping symbol -> Quote with last_price, prev_close, as_of.
        Missing symbols are omitted from result.
        """
        ...
