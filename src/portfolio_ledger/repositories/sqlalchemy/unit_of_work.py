"""SQLAlchemy unit of work: one database transaction per ledger operation."""

import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """Commits on success and rolls back on any exception."""

    def __init__(self, db: Session):
        self._db = db

    @contextmanager
    def atomic(self) -> Generator[None, None, None]:
        try:
            yield
            self._db.commit()
        except Exception:
            logger.debug("Rolling back database transaction")
            self._db.rollback()
            raise
