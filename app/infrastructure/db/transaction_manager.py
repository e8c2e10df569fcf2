from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.transaction_manager import TransactionManager


class SQLAlchemyTransactionManager(TransactionManager):
    """
    Unit of work over one AsyncSession.

    Nested ``start()`` calls join the outermost block, which commits or rolls
    back everything. Reads issued outside any block leave an implicit
    transaction open (SQLAlchemy autobegin); it is closed before a new block
    begins so the block owns its commit.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._depth = 0

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        if self._session.in_transaction():
            await self._session.commit()

        self._depth = 1
        try:
            async with self._session.begin():
                yield
        finally:
            self._depth = 0
