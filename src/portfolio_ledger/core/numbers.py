"""Decimal precision shared by the ledger and its storage columns."""

from decimal import ROUND_HALF_EVEN, Decimal

# Matches Numeric(20, 8) storage
LEDGER_QUANTUM = Decimal("0.00000001")


def quantize(value: Decimal) -> Decimal:
    """Round to ledger precision so stored and in-memory values agree."""
    return value.quantize(LEDGER_QUANTUM, rounding=ROUND_HALF_EVEN)
