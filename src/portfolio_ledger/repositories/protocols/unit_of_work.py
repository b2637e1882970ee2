"""Unit of work protocol: the all-or-nothing boundary for ledger writes."""

from typing import ContextManager, Protocol


class UnitOfWork(Protocol):
    """Interface for transactional scopes."""

    def atomic(self) -> ContextManager[None]:
        """Commit everything written inside the block, or roll all of it back."""
        ...
