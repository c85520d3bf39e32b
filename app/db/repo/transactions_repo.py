from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.transactions import Transaction

TRANSACTION_SORT_COLUMNS = {
    "trx_at": Transaction.trx_at,
    "id": Transaction.id,
}


class TransactionsRepo:
    @staticmethod
    async def list_for_account(
        session: AsyncSession,
        *,
        account_id: int,
        address: str,
        sort_by: str = "trx_at",
        descending: bool = True,
        limit: int = 20,
    ) -> list[Transaction]:
        sort_column = TRANSACTION_SORT_COLUMNS.get(sort_by)
        if sort_column is None:
            raise ValueError(f"unsupported sort column: {sort_by}")

        order = sort_column.desc() if descending else sort_column.asc()
        stmt = (
            select(Transaction)
            .where(
                Transaction.account_id == account_id,
                Transaction.address == address,
            )
            .order_by(order, Transaction.id.desc() if descending else Transaction.id.asc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
