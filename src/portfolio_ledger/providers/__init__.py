"""Quote providers for display-only valuation."""

from portfolio_ledger.providers.quote_provider import QuoteProvider
from portfolio_ledger.providers.stub_provider import StubQuoteProvider

__all__ = ["QuoteProvider", "StubQuoteProvider"]
