"""Market data service: cached quotes with graceful degradation."""

import logging
from datetime import datetime
from typing import Optional

from portfolio_ledger.core.timezone import now_eastern
from portfolio_ledger.domain.views import Quote
from portfolio_ledger.providers.quote_provider import QuoteProvider

logger = logging.getLogger(__name__)


class MarketDataService:
    """
    Wraps a quote provider with a TTL cache.

    Provider failures fall back to whatever the cache holds; they never raise.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        cache_ttl_seconds: int = 60,
    ):
        self._provider = provider
        self._cache_ttl = cache_ttl_seconds
        self._quote_cache: dict[str, Quote] = {}
        self._cache_time: Optional[datetime] = None

    def get_quotes(self, symbols: list[str]) -> dict[str, Quote]:
        """
        Fetch quotes for symbols with caching.

        Returns dict mapping symbol -> Quote; symbols with no quote are omitted.
        """
        if not symbols:
            return {}

        symbols = [s.upper() for s in symbols]

        if self._is_cache_valid():
            result = {s: self._quote_cache[s] for s in symbols if s in self._quote_cache}
            missing = [s for s in symbols if s not in result]
            if not missing:
                return result
        else:
            missing = symbols
            result = {}

        try:
            fresh = self._provider.get_quotes(missing)
        except Exception as e:
            logger.warning(f"Quote provider failed for {', '.join(missing)}: {e}")
            fresh = {s: self._quote_cache[s] for s in missing if s in self._quote_cache}
        else:
            self._quote_cache.update(fresh)
            self._cache_time = now_eastern()

        result.update(fresh)
        return {s: result[s] for s in symbols if s in result}

    def _is_cache_valid(self) -> bool:
        if not self._cache_time:
            return False
        elapsed = (now_eastern() - self._cache_time).total_seconds()
        return elapsed < self._cache_ttl
