"""Apply and corrective recomputation of journal transactions.

apply_transaction, reverse_transaction and amend_transaction take a
LedgerState and return a new one; the input is never mutated, so a failure
at any step leaves the caller's state exactly as it was. The amend and remove
paths reuse the same apply and reverse steps as a fresh transaction.
"""

from dataclasses import replace
from decimal import Decimal

from portfolio_ledger.core.exceptions import (
    ConflictError,
    LedgerConsistencyError,
    ValidationError,
)
from portfolio_ledger.domain.ledger import cash, holdings, tax_lots
from portfolio_ledger.domain.ledger.lot_sales import total_shares_sold
from portfolio_ledger.domain.ledger.state import LedgerState
from portfolio_ledger.domain.models import Transaction, TransactionType

# Fields whose change alters ledger effects; anything else is annotation only
LEDGER_FIELDS = ("symbol", "txn_type", "shares", "price", "fees", "executed_at")


def validate_transaction(txn: Transaction) -> None:
    """Reject malformed input before any state is touched."""
    if not isinstance(txn.txn_type, TransactionType):
        raise ValidationError(f"Unknown transaction type: {txn.txn_type}")
    if not txn.symbol or not txn.symbol.strip():
        raise ValidationError(f"{txn.txn_type.value} requires a symbol")
    if txn.shares is None or txn.shares <= 0:
        raise ValidationError(f"{txn.txn_type.value} requires shares > 0")
    if txn.price is None or txn.price < 0:
        raise ValidationError(f"{txn.txn_type.value} requires price >= 0")
    if txn.fees is None or txn.fees < 0:
        raise ValidationError("Fees cannot be negative")


def changes_ledger_effects(original: Transaction, updated: Transaction) -> bool:
    return any(getattr(original, name) != getattr(updated, name) for name in LEDGER_FIELDS)


def apply_transaction(state: LedgerState, txn: Transaction) -> LedgerState:
    """Return the state with txn applied to cash, lots, holdings and lot sales."""
    validate_transaction(txn)
    new_state = state.copy()
    replay(new_state, txn)
    assert_consistent(new_state, txn.symbol)
    return new_state


def reverse_transaction(state: LedgerState, txn_id: str) -> LedgerState:
    """Return the state with every ledger effect of txn_id undone and the txn dropped."""
    new_state = state.copy()
    txn = new_state.get_txn(txn_id)
    reverse(new_state, txn)
    assert_consistent(new_state, txn.symbol)
    return new_state


def amend_transaction(state: LedgerState, txn_id: str, updated: Transaction) -> LedgerState:
    """
    Reverse txn_id, then replay it with the updated field values.

    Raises:
        ConflictError: if the original or updated transaction trades shares
            and a split of that symbol was applied after the original.
    """
    validate_transaction(updated)
    new_state = state.copy()
    original = new_state.get_txn(txn_id)
    _reject_amend_across_split(new_state, original, updated)
    reverse(new_state, original)
    replay(new_state, replace(updated, txn_id=txn_id))
    assert_consistent(new_state, original.symbol)
    assert_consistent(new_state, updated.symbol)
    return new_state


# =============================================================================
# APPLY
# =============================================================================


def replay(state: LedgerState, txn: Transaction) -> Transaction:
    """
    Run the apply pipeline on a working state.

    Pre-conditions are checked first; then cash, tax lots and holdings are
    updated in that order and the transaction joins the journal.
    """
    state.require_symbol(txn.symbol)
    if txn.txn_type == TransactionType.BUY:
        cash.check_funds(state, txn.gross_amount + txn.fees)
    elif txn.txn_type == TransactionType.SELL:
        holdings.check_shares(state, txn.symbol, txn.shares)
    elif txn.txn_type == TransactionType.SPLIT and state.holding(txn.symbol) is None:
        raise ValidationError(f"Cannot split {txn.symbol}: no open position")

    applied = replace(txn, applied_seq=state.next_seq())
    cash.apply_delta(state, applied.cash_delta)

    if applied.txn_type == TransactionType.BUY:
        tax_lots.open_lot(
            state,
            symbol=applied.symbol,
            purchase_date=applied.trade_date,
            shares=applied.shares,
            cost_per_share=applied.price,
            source_txn_id=applied.txn_id,
        )
        holdings.apply_buy(state, applied.symbol, applied.shares, applied.price, applied.trade_date)

    elif applied.txn_type == TransactionType.SELL:
        tax_lots.consume_fifo(
            state,
            symbol=applied.symbol,
            shares_to_sell=applied.shares,
            sale_price=applied.price,
            sale_date=applied.trade_date,
            sell_txn_id=applied.txn_id,
        )
        holdings.apply_sell(state, applied.symbol, applied.shares)

    elif applied.txn_type == TransactionType.SPLIT:
        tax_lots.adjust_for_split(state, applied.symbol, applied.split_ratio)
        holdings.apply_split(state, applied.symbol, applied.split_ratio)

    state.journal.append(applied)
    return applied


# =============================================================================
# REVERSE
# =============================================================================


def reverse(state: LedgerState, txn: Transaction) -> None:
    """Undo txn on a working state and drop it from the journal."""
    state.require_symbol(txn.symbol)
    state.journal.remove(txn)

    if txn.txn_type == TransactionType.BUY:
        reverse_buy(state, txn)
    elif txn.txn_type == TransactionType.SELL:
        reverse_sell(state, txn)
    elif txn.txn_type == TransactionType.DIVIDEND:
        reverse_dividend(state, txn)
    elif txn.txn_type == TransactionType.SPLIT:
        reverse_split(state, txn)


def reverse_buy(state: LedgerState, txn: Transaction) -> None:
    """
    Delete the lots a buy opened and rebuild the holding.

    Raises:
        ConflictError: if a later sell consumed any of those lots.
    """
    lots = state.lots_from_txn(txn.txn_id)
    dependent = state.sales_for_lots({lot.lot_id for lot in lots})
    if dependent:
        sells = sorted({sale.sell_txn_id for sale in dependent})
        raise ConflictError(
            f"Buy {txn.txn_id} has lots consumed by later sells ({', '.join(sells)}); "
            f"remove or amend those sells first"
        )

    tax_lots.remove_lots(state, lots)
    cash.apply_delta(state, -txn.cash_delta)
    holdings.recompute_from_scratch(state, txn.symbol)


def reverse_sell(state: LedgerState, txn: Transaction) -> None:
    """
    Return sold shares to their lots and delete the sell's lot sales.

    Raises:
        ConflictError: if a split of the symbol was applied after the sell.
    """
    _reject_if_later(
        state,
        txn,
        (TransactionType.SPLIT,),
        "its lot sales predate a later split",
    )

    sold = total_shares_sold(state.sales_for_txn(txn.txn_id))
    if sold != txn.shares:
        raise LedgerConsistencyError(
            f"Sell {txn.txn_id} recorded {sold} shares in lot sales, expected {txn.shares}"
        )

    restored = tax_lots.restore_sales(state, txn.txn_id)
    cash.apply_delta(state, -txn.cash_delta)
    holdings.restore_sold_shares(state, txn.symbol, restored)


def reverse_dividend(state: LedgerState, txn: Transaction) -> None:
    cash.apply_delta(state, -txn.cash_delta)


def reverse_split(state: LedgerState, txn: Transaction) -> None:
    """
    Rescale lots and holding by the inverse ratio.

    Raises:
        ConflictError: if a buy, sell or split of the symbol was applied after it.
    """
    _reject_if_later(
        state,
        txn,
        (TransactionType.BUY, TransactionType.SELL, TransactionType.SPLIT),
        "later trades are recorded in split-adjusted shares",
    )

    tax_lots.revert_split(state, txn)
    cash.apply_delta(state, -txn.cash_delta)
    holdings.revert_split(state, txn.symbol)


def _reject_if_later(
    state: LedgerState,
    txn: Transaction,
    types: tuple[TransactionType, ...],
    reason: str,
) -> None:
    later = [
        other
        for other in state.journal_for(txn.symbol)
        if other.txn_type in types and other.applied_seq > txn.applied_seq
    ]
    if later:
        raise ConflictError(
            f"Cannot reverse {txn.txn_type.value} {txn.txn_id}: {reason} "
            f"({', '.join(other.txn_id for other in later)})"
        )


def _reject_amend_across_split(state: LedgerState, original: Transaction, updated: Transaction) -> None:
    # Replay appends at the end of the application order, after any such split
    traded = {
        txn.symbol
        for txn in (original, updated)
        if txn.txn_type in (TransactionType.BUY, TransactionType.SELL)
    }
    splits = [
        other
        for symbol in sorted(traded)
        for other in state.journal_for(symbol)
        if other.txn_type == TransactionType.SPLIT and other.applied_seq > original.applied_seq
    ]
    if splits:
        raise ConflictError(
            f"Cannot amend {original.txn_type.value} {original.txn_id}: later splits are "
            f"recorded against its shares ({', '.join(split.txn_id for split in splits)}); "
            f"remove those splits first"
        )


# =============================================================================
# INVARIANTS
# =============================================================================


def assert_consistent(state: LedgerState, symbol: str) -> None:
    """Holding shares must equal the open lots, and no holding may be empty."""
    lot_shares = tax_lots.shares_in_lots(state, symbol)
    holding = state.holding(symbol)
    held = holding.total_shares if holding else Decimal("0")
    if held != lot_shares or (holding is not None and held <= 0):
        raise LedgerConsistencyError(
            f"Holding of {symbol} in portfolio {state.portfolio_id} shows {held} shares "
            f"but open lots hold {lot_shares}"
        )
