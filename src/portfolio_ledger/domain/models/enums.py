"""Enumerations for domain models."""

from enum import Enum


class TransactionType(str, Enum):
    """Types of journal transactions."""

    BUY = "buy"
    SELL = "sell"
    DIVIDEND = "dividend"
    SPLIT = "split"
