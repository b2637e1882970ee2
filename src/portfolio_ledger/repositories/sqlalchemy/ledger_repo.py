"""SQLAlchemy implementation of LedgerRepository (holdings, tax lots, lot sales)."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import extract
from sqlalchemy.orm import Session

from portfolio_ledger.core.timezone import now_eastern, to_eastern
from portfolio_ledger.domain.ledger import LedgerState
from portfolio_ledger.domain.models import Holding, LotSale, TaxLot
from portfolio_ledger.repositories.sqlalchemy.orm_models import (
    HoldingORM,
    LotSaleORM,
    TaxLotORM,
)


class SqlAlchemyLedgerRepository:
    """SQLAlchemy-backed repository for derived ledger state."""

    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Reads
    # =========================================================================

    def list_holdings(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
    ) -> list[Holding]:
        """Get holdings for a portfolio, ordered by symbol."""
        query = self._db.query(HoldingORM).filter(HoldingORM.portfolio_id == portfolio_id)
        if symbols is not None:
            query = query.filter(HoldingORM.symbol.in_(symbols))
        return [self._holding_to_domain(h) for h in query.order_by(HoldingORM.symbol).all()]

    def list_lots(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
        open_only: bool = False,
    ) -> list[TaxLot]:
        """Get tax lots in FIFO order."""
        query = self._db.query(TaxLotORM).filter(TaxLotORM.portfolio_id == portfolio_id)
        if symbols is not None:
            query = query.filter(TaxLotORM.symbol.in_(symbols))
        if open_only:
            query = query.filter(TaxLotORM.shares_remaining > 0)
        query = query.order_by(
            TaxLotORM.symbol,
            TaxLotORM.purchase_date,
            TaxLotORM.created_at,
            TaxLotORM.lot_id,
        )
        return [self._lot_to_domain(lot) for lot in query.all()]

    def list_lot_sales(
        self,
        portfolio_id: str,
        symbols: Optional[list[str]] = None,
        year: Optional[int] = None,
    ) -> list[LotSale]:
        """Get lot sales, newest sale first."""
        query = (
            self._db.query(LotSaleORM, TaxLotORM.symbol)
            .join(TaxLotORM, LotSaleORM.lot_id == TaxLotORM.lot_id)
            .filter(TaxLotORM.portfolio_id == portfolio_id)
        )
        if symbols is not None:
            query = query.filter(TaxLotORM.symbol.in_(symbols))
        if year is not None:
            query = query.filter(extract("year", LotSaleORM.sale_date) == year)
        query = query.order_by(LotSaleORM.sale_date.desc(), LotSaleORM.created_at.desc())
        return [self._sale_to_domain(sale, symbol) for sale, symbol in query.all()]

    # =========================================================================
    # Writes
    # =========================================================================

    def save_state(self, before: LedgerState, after: LedgerState) -> None:
        """
        Persist the difference between two ledger states.

        Rows are matched by id: lot sales and lots that disappeared are deleted
        (sales first), changed lots are updated, new lots then new sales are
        inserted, and holdings of every loaded symbol are upserted or removed.
        Nothing is committed here.
        """
        before_sales = {sale.sale_id for sale in before.lot_sales}
        after_sales = {sale.sale_id: sale for sale in after.lot_sales}
        removed_sales = before_sales - after_sales.keys()
        if removed_sales:
            self._db.query(LotSaleORM).filter(LotSaleORM.sale_id.in_(sorted(removed_sales))).delete()

        before_lots = {lot.lot_id: lot for lot in before.lots}
        after_lots = {lot.lot_id: lot for lot in after.lots}
        removed_lots = before_lots.keys() - after_lots.keys()
        if removed_lots:
            self._db.query(TaxLotORM).filter(TaxLotORM.lot_id.in_(sorted(removed_lots))).delete()

        for lot_id, lot in after_lots.items():
            previous = before_lots.get(lot_id)
            if previous is None:
                self._db.add(self._lot_to_orm(lot))
            elif previous != lot:
                orm_lot = self._db.get(TaxLotORM, lot_id)
                orm_lot.shares_remaining = lot.shares_remaining
                orm_lot.cost_per_share = lot.cost_per_share
                orm_lot.purchase_date = lot.purchase_date
        self._db.flush()

        for sale_id, sale in after_sales.items():
            if sale_id not in before_sales:
                self._db.add(self._sale_to_orm(sale))

        for symbol in sorted(before.symbols | after.symbols):
            holding = after.holdings.get(symbol)
            if holding is None:
                if symbol in before.holdings:
                    self._db.query(HoldingORM).filter(
                        HoldingORM.portfolio_id == after.portfolio_id,
                        HoldingORM.symbol == symbol,
                    ).delete()
            elif holding != before.holdings.get(symbol):
                self._upsert_holding(holding)

        self._db.flush()

    def _upsert_holding(self, holding: Holding) -> None:
        orm_holding = self._db.get(HoldingORM, (holding.portfolio_id, holding.symbol))
        if orm_holding is None:
            orm_holding = HoldingORM(portfolio_id=holding.portfolio_id, symbol=holding.symbol)
            self._db.add(orm_holding)
        orm_holding.total_shares = holding.total_shares
        orm_holding.average_cost = holding.average_cost
        orm_holding.first_purchase_date = holding.first_purchase_date
        orm_holding.updated_at = holding.updated_at or now_eastern()

    # =========================================================================
    # Mapping
    # =========================================================================

    @staticmethod
    def _lot_to_orm(lot: TaxLot) -> TaxLotORM:
        return TaxLotORM(
            lot_id=lot.lot_id,
            portfolio_id=lot.portfolio_id,
            symbol=lot.symbol,
            purchase_date=lot.purchase_date,
            shares_remaining=lot.shares_remaining,
            cost_per_share=lot.cost_per_share,
            txn_id=lot.txn_id,
            created_at=lot.created_at or now_eastern(),
        )

    @staticmethod
    def _sale_to_orm(sale: LotSale) -> LotSaleORM:
        return LotSaleORM(
            sale_id=sale.sale_id,
            lot_id=sale.lot_id,
            sell_txn_id=sale.sell_txn_id,
            shares_sold=sale.shares_sold,
            sale_price=sale.sale_price,
            realized_gain=sale.realized_gain,
            is_short_term=sale.is_short_term,
            sale_date=sale.sale_date,
            created_at=sale.created_at or now_eastern(),
        )

    @staticmethod
    def _holding_to_domain(orm: HoldingORM) -> Holding:
        return Holding(
            portfolio_id=orm.portfolio_id,
            symbol=orm.symbol,
            total_shares=Decimal(str(orm.total_shares)),
            average_cost=Decimal(str(orm.average_cost)),
            first_purchase_date=orm.first_purchase_date,
            updated_at=to_eastern(orm.updated_at) if orm.updated_at else None,
        )

    @staticmethod
    def _lot_to_domain(orm: TaxLotORM) -> TaxLot:
        return TaxLot(
            lot_id=orm.lot_id,
            portfolio_id=orm.portfolio_id,
            symbol=orm.symbol,
            purchase_date=orm.purchase_date,
            shares_remaining=Decimal(str(orm.shares_remaining)),
            cost_per_share=Decimal(str(orm.cost_per_share)),
            txn_id=orm.txn_id,
            created_at=to_eastern(orm.created_at) if orm.created_at else None,
        )

    @staticmethod
    def _sale_to_domain(orm: LotSaleORM, symbol: str) -> LotSale:
        return LotSale(
            sale_id=orm.sale_id,
            lot_id=orm.lot_id,
            sell_txn_id=orm.sell_txn_id,
            symbol=symbol,
            shares_sold=Decimal(str(orm.shares_sold)),
            sale_price=Decimal(str(orm.sale_price)),
            realized_gain=Decimal(str(orm.realized_gain)),
            is_short_term=bool(orm.is_short_term),
            sale_date=orm.sale_date,
            created_at=to_eastern(orm.created_at) if orm.created_at else None,
        )
