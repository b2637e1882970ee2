"""Holdings aggregator: per-symbol total shares and weighted-average cost."""

from datetime import date
from decimal import Decimal
from typing import Optional

from portfolio_ledger.core.exceptions import InsufficientSharesError
from portfolio_ledger.core.numbers import quantize
from portfolio_ledger.core.timezone import now_eastern
from portfolio_ledger.domain.ledger.state import LedgerState
from portfolio_ledger.domain.ledger.tax_lots import shares_in_lots
from portfolio_ledger.domain.models import Holding, TransactionType


def check_shares(state: LedgerState, symbol: str, shares: Decimal) -> None:
    """Raise InsufficientSharesError if shares exceed the holding."""
    available = state.shares_held(symbol)
    if shares > available:
        raise InsufficientSharesError(
            symbol=symbol,
            requested=str(shares),
            available=str(available),
        )


def apply_buy(
    state: LedgerState,
    symbol: str,
    shares: Decimal,
    price: Decimal,
    purchase_date: date,
) -> Holding:
    """Add shares, re-weighting the average cost."""
    holding = state.holding(symbol)
    if holding is None:
        holding = Holding(
            portfolio_id=state.portfolio_id,
            symbol=symbol,
            total_shares=shares,
            average_cost=price,
            first_purchase_date=purchase_date,
        )
        state.holdings[symbol] = holding
    else:
        new_shares = holding.total_shares + shares
        holding.average_cost = quantize(
            (holding.total_shares * holding.average_cost + shares * price) / new_shares
        )
        holding.total_shares = new_shares
        if holding.first_purchase_date is None or purchase_date < holding.first_purchase_date:
            holding.first_purchase_date = purchase_date
    holding.updated_at = now_eastern()
    return holding


def apply_sell(state: LedgerState, symbol: str, shares: Decimal) -> Optional[Holding]:
    """
    Remove shares at unchanged average cost.

    Deletes the holding when nothing is left; returns None in that case.
    """
    check_shares(state, symbol, shares)
    holding = state.holdings[symbol]
    holding.total_shares -= shares
    if holding.total_shares <= 0:
        del state.holdings[symbol]
        return None
    holding.updated_at = now_eastern()
    return holding


def apply_split(state: LedgerState, symbol: str, ratio: Decimal) -> Optional[Holding]:
    """Scale the average cost; total shares follow the already rescaled lots."""
    holding = state.holding(symbol)
    if holding is None:
        return None
    holding.total_shares = shares_in_lots(state, symbol)
    holding.average_cost = quantize(holding.average_cost / ratio)
    holding.updated_at = now_eastern()
    return holding


def revert_split(state: LedgerState, symbol: str) -> Optional[Holding]:
    """Undo apply_split once the split has left the journal and the lots."""
    holding = state.holding(symbol)
    if holding is None:
        return None
    holding.total_shares = shares_in_lots(state, symbol)
    holding.average_cost = journal_average_cost(state, symbol)
    holding.updated_at = now_eastern()
    return holding


def restore_sold_shares(state: LedgerState, symbol: str, shares: Decimal) -> Optional[Holding]:
    """
    Add back shares of a reversed sell; rebuilds the holding if it was closed.

    The average cost is re-derived from the remaining journal, so a buy made
    after the position closed blends with the restored shares again.
    """
    holding = state.holding(symbol)
    if holding is None:
        return recompute_from_scratch(state, symbol)
    holding.total_shares += shares
    holding.average_cost = journal_average_cost(state, symbol)
    holding.updated_at = now_eastern()
    return holding


def _replay_journal(state: LedgerState, symbol: str) -> tuple[Decimal, Decimal]:
    shares = Decimal("0")
    average_cost = Decimal("0")

    for txn in state.journal_for(symbol):
        if txn.txn_type == TransactionType.BUY:
            new_shares = shares + txn.shares
            average_cost = quantize((shares * average_cost + txn.shares * txn.price) / new_shares)
            shares = new_shares
        elif txn.txn_type == TransactionType.SELL:
            shares -= txn.shares
            if shares <= 0:
                shares = Decimal("0")
                average_cost = Decimal("0")
        elif txn.txn_type == TransactionType.SPLIT and shares > 0:
            shares *= txn.split_ratio
            average_cost = quantize(average_cost / txn.split_ratio)

    return shares, average_cost


def journal_average_cost(state: LedgerState, symbol: str) -> Decimal:
    """
    Weighted-average cost from replaying the symbol's buys, sells and splits
    in application order; a sell that closes the position resets it.

    Falls back to the cost of the open lots when the replay ends flat.
    """
    state.require_symbol(symbol)
    shares, average_cost = _replay_journal(state, symbol)
    if shares > 0:
        return average_cost

    lot_shares = shares_in_lots(state, symbol)
    if lot_shares <= 0:
        return Decimal("0")
    return quantize(
        sum((lot.cost_basis for lot in state.open_lots(symbol)), Decimal("0")) / lot_shares
    )


def recompute_from_scratch(state: LedgerState, symbol: str) -> Optional[Holding]:
    """
    Rebuild a holding from the journal and the open lots.

    Total shares come from the open lots so the holding always matches them.
    """
    state.require_symbol(symbol)
    open_lots = state.open_lots(symbol)
    lot_shares = shares_in_lots(state, symbol)
    if lot_shares <= 0:
        state.holdings.pop(symbol, None)
        return None

    average_cost = journal_average_cost(state, symbol)

    holding = Holding(
        portfolio_id=state.portfolio_id,
        symbol=symbol,
        total_shares=lot_shares,
        average_cost=average_cost,
        first_purchase_date=min(lot.purchase_date for lot in open_lots),
        updated_at=now_eastern(),
    )
    state.holdings[symbol] = holding
    return holding
