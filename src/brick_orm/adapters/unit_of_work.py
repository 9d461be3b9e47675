"""SQLAlchemy-backed Unit of Work for brick-orm.

Provides a context-managed UnitOfWork that opens one ORM Session from a
session factory and closes it on every exit path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from brick_orm.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory
        self.session: Session

    def __enter__(self):
        self.session = self.session_factory()
        logger.debug("Opened session %x", id(self.session))
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.session.close()
            logger.debug("Closed session %x", id(self.session))

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
