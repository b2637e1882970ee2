"""Tax-lot ledger with FIFO matching.

Implements:
- lot creation for buys
- FIFO consumption for sells, emitting one LotSale per lot touched
- in-place scaling of open lots for splits
"""

import uuid
from datetime import date
from decimal import Decimal

from portfolio_ledger.core.exceptions import LedgerConsistencyError
from portfolio_ledger.core.numbers import quantize
from portfolio_ledger.core.timezone import now_eastern
from portfolio_ledger.domain.ledger.lot_sales import record_sale
from portfolio_ledger.domain.ledger.state import LedgerState
from portfolio_ledger.domain.models import LotSale, TaxLot, Transaction, TransactionType

LONG_TERM_HOLDING_DAYS = 365


def is_short_term(purchase_date: date, sale_date: date) -> bool:
    """Short-term when held fewer than 365 days."""
    return (sale_date - purchase_date).days < LONG_TERM_HOLDING_DAYS


def open_lot(
    state: LedgerState,
    symbol: str,
    purchase_date: date,
    shares: Decimal,
    cost_per_share: Decimal,
    source_txn_id: str,
) -> TaxLot:
    """Append a new lot with all shares remaining."""
    state.require_symbol(symbol)
    lot = TaxLot(
        lot_id=str(uuid.uuid4()),
        portfolio_id=state.portfolio_id,
        symbol=symbol,
        purchase_date=purchase_date,
        shares_remaining=shares,
        cost_per_share=cost_per_share,
        txn_id=source_txn_id,
        created_at=now_eastern(),
    )
    state.lots.append(lot)
    return lot


def consume_fifo(
    state: LedgerState,
    symbol: str,
    shares_to_sell: Decimal,
    sale_price: Decimal,
    sale_date: date,
    sell_txn_id: str,
) -> list[LotSale]:
    """
    Consume open lots oldest first to satisfy a sale.

    Returns the LotSale records emitted, in consumption order.

    Raises:
        LedgerConsistencyError: if open lots run out before the sale is covered;
            the holding check upstream should make this impossible.
    """
    state.require_symbol(symbol)
    remaining = shares_to_sell
    sales: list[LotSale] = []

    for lot in state.open_lots(symbol):
        if remaining <= 0:
            break

        take = min(lot.shares_remaining, remaining)
        sale = LotSale(
            sale_id=str(uuid.uuid4()),
            lot_id=lot.lot_id,
            sell_txn_id=sell_txn_id,
            symbol=symbol,
            shares_sold=take,
            sale_price=sale_price,
            realized_gain=quantize(take * (sale_price - lot.cost_per_share)),
            is_short_term=is_short_term(lot.purchase_date, sale_date),
            sale_date=sale_date,
            created_at=now_eastern(),
        )
        sales.append(record_sale(state, sale))

        lot.shares_remaining -= take
        remaining -= take

    if remaining > 0:
        raise LedgerConsistencyError(
            f"Open lots of {symbol} exhausted with {remaining} of {shares_to_sell} shares "
            f"unmatched for sell {sell_txn_id}"
        )
    return sales


def restore_sales(state: LedgerState, sell_txn_id: str) -> Decimal:
    """
    Undo a sell's FIFO consumption.

    Returns each LotSale's shares to its source lot and deletes the LotSale.
    Returns the total shares restored.
    """
    restored = Decimal("0")
    for sale in state.sales_for_txn(sell_txn_id):
        lot = state.get_lot(sale.lot_id)
        lot.shares_remaining += sale.shares_sold
        restored += sale.shares_sold
        state.lot_sales.remove(sale)
    return restored


def adjust_for_split(state: LedgerState, symbol: str, ratio: Decimal) -> None:
    """Scale every open lot; total cost basis per lot is unchanged."""
    state.require_symbol(symbol)
    for lot in state.open_lots(symbol):
        lot.shares_remaining = quantize(lot.shares_remaining * ratio)
        lot.cost_per_share = quantize(lot.cost_per_share / ratio)


def revert_split(state: LedgerState, split: Transaction) -> None:
    """
    Undo adjust_for_split on every open lot.

    Each lot is rebuilt from its buy and the sells and splits applied between
    that buy and `split`, which gives back the exact pre-split values.

    Raises:
        LedgerConsistencyError: if a lot does not hold what `split` left in it.
    """
    state.require_symbol(split.symbol)
    for lot in state.open_lots(split.symbol):
        shares, cost_per_share = _lot_before(state, lot, split.applied_seq)
        if quantize(shares * split.split_ratio) != lot.shares_remaining:
            raise LedgerConsistencyError(
                f"Tax lot {lot.lot_id} holds {lot.shares_remaining} shares, expected "
                f"{shares} x {split.split_ratio} after split {split.txn_id}"
            )
        lot.shares_remaining = shares
        lot.cost_per_share = cost_per_share


def _lot_before(state: LedgerState, lot: TaxLot, until_seq: int) -> tuple[Decimal, Decimal]:
    """Shares remaining and cost per share of a lot just before applied_seq until_seq."""
    buy = state.get_txn(lot.txn_id)
    shares, cost_per_share = buy.shares, buy.price
    for txn in state.journal_for(lot.symbol):
        if not buy.applied_seq < txn.applied_seq < until_seq:
            continue
        if txn.txn_type == TransactionType.SELL:
            shares -= sum(
                (sale.shares_sold for sale in state.sales_for_txn(txn.txn_id) if sale.lot_id == lot.lot_id),
                Decimal("0"),
            )
        elif txn.txn_type == TransactionType.SPLIT:
            shares = quantize(shares * txn.split_ratio)
            cost_per_share = quantize(cost_per_share / txn.split_ratio)
    return shares, cost_per_share


def remove_lots(state: LedgerState, lots: list[TaxLot]) -> None:
    lot_ids = {lot.lot_id for lot in lots}
    state.lots = [lot for lot in state.lots if lot.lot_id not in lot_ids]


def shares_in_lots(state: LedgerState, symbol: str) -> Decimal:
    return sum((lot.shares_remaining for lot in state.open_lots(symbol)), Decimal("0"))
