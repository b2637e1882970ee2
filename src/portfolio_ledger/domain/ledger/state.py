"""In-memory ledger aggregate for one portfolio."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from portfolio_ledger.core.exceptions import LedgerConsistencyError
from portfolio_ledger.core.timezone import EASTERN_TZ
from portfolio_ledger.domain.models import Holding, LotSale, TaxLot, Transaction

_EPOCH = EASTERN_TZ.localize(datetime(1970, 1, 1))


@dataclass
class LedgerState:
    """
    Derived ledger state of a portfolio, restricted to a set of loaded symbols.

    The cash balance is portfolio-wide; journal, holdings, lots and lot sales
    only cover `symbols`. Engine functions refuse to touch any other symbol.
    """

    portfolio_id: str
    cash_balance: Decimal
    symbols: set[str] = field(default_factory=set)
    journal: list[Transaction] = field(default_factory=list)
    holdings: dict[str, Holding] = field(default_factory=dict)
    lots: list[TaxLot] = field(default_factory=list)
    lot_sales: list[LotSale] = field(default_factory=list)
    last_seq: int = 0

    def copy(self) -> "LedgerState":
        return copy.deepcopy(self)

    def require_symbol(self, symbol: str) -> None:
        if symbol not in self.symbols:
            raise LedgerConsistencyError(
                f"Ledger state for portfolio {self.portfolio_id} was not loaded for {symbol}"
            )

    def next_seq(self) -> int:
        self.last_seq += 1
        return self.last_seq

    # Lookups

    def holding(self, symbol: str) -> Optional[Holding]:
        return self.holdings.get(symbol)

    def lots_for(self, symbol: str) -> list[TaxLot]:
        """All lots of a symbol in FIFO order, consumed lots included."""
        return sorted(
            (lot for lot in self.lots if lot.symbol == symbol),
            key=lambda lot: (lot.purchase_date, lot.created_at or _EPOCH, lot.lot_id),
        )

    def open_lots(self, symbol: str) -> list[TaxLot]:
        return [lot for lot in self.lots_for(symbol) if lot.is_open]

    def lots_from_txn(self, txn_id: str) -> list[TaxLot]:
        return [lot for lot in self.lots if lot.txn_id == txn_id]

    def get_lot(self, lot_id: str) -> TaxLot:
        for lot in self.lots:
            if lot.lot_id == lot_id:
                return lot
        raise LedgerConsistencyError(f"Tax lot {lot_id} referenced by a lot sale does not exist")

    def sales_for_txn(self, txn_id: str) -> list[LotSale]:
        return [sale for sale in self.lot_sales if sale.sell_txn_id == txn_id]

    def sales_for_lots(self, lot_ids: set[str]) -> list[LotSale]:
        return [sale for sale in self.lot_sales if sale.lot_id in lot_ids]

    def journal_for(self, symbol: str) -> list[Transaction]:
        """Applied transactions of a symbol in application order."""
        return sorted(
            (txn for txn in self.journal if txn.symbol == symbol),
            key=lambda txn: txn.applied_seq,
        )

    def shares_held(self, symbol: str) -> Decimal:
        holding = self.holding(symbol)
        return holding.total_shares if holding else Decimal("0")

    def get_txn(self, txn_id: str) -> Transaction:
        for txn in self.journal:
            if txn.txn_id == txn_id:
                return txn
        raise LedgerConsistencyError(f"Transaction {txn_id} is not applied to portfolio {self.portfolio_id}")
