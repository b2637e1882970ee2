"""View models for realized gain reporting."""

from dataclasses import dataclass, field
from decimal import Decimal

from portfolio_ledger.domain.models import LotSale


def _zero() -> Decimal:
    return Decimal("0")


@dataclass
class RealizedGainsSummary:
    """
    Realized gain totals split by holding term.

    Loss subtotals are sums of negative gains, so gain + loss == total per term.
    """

    total_realized_gain: Decimal = field(default_factory=_zero)
    short_term_total: Decimal = field(default_factory=_zero)
    short_term_gain: Decimal = field(default_factory=_zero)
    short_term_loss: Decimal = field(default_factory=_zero)
    long_term_total: Decimal = field(default_factory=_zero)
    long_term_gain: Decimal = field(default_factory=_zero)
    long_term_loss: Decimal = field(default_factory=_zero)


@dataclass
class RealizedGainsReport:
    """Lot sales matching a query plus their aggregate summary."""

    records: list[LotSale] = field(default_factory=list)
    summary: RealizedGainsSummary = field(default_factory=RealizedGainsSummary)
