"""Per-portfolio write locks."""

import threading
from contextlib import contextmanager
from typing import Generator, Optional


class PortfolioLockRegistry:
    """
    Hands out one re-entrant lock per portfolio id.

    Ledger writes on the same portfolio run one at a time; writes on
    different portfolios never contend.
    """

    def __init__(self):
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def lock_for(self, portfolio_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(portfolio_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[portfolio_id] = lock
            return lock

    @contextmanager
    def hold(self, portfolio_id: str) -> Generator[None, None, None]:
        """Hold the portfolio's write lock for the duration of the block."""
        with self.lock_for(portfolio_id):
            yield

    def discard(self, portfolio_id: str) -> None:
        with self._guard:
            self._locks.pop(portfolio_id, None)


# Process-wide registry shared by every request
_registry: Optional[PortfolioLockRegistry] = None
_registry_guard = threading.Lock()


def get_lock_registry() -> PortfolioLockRegistry:
    """Return the shared registry; concurrent first calls all get the same one."""
    global _registry
    with _registry_guard:
        if _registry is None:
            _registry = PortfolioLockRegistry()
        return _registry


def reset_lock_registry() -> None:
    global _registry
    with _registry_guard:
        _registry = None
