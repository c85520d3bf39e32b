from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.flat_hives import FlatHive


class FlatHivesRepo:
    @staticmethod
    async def has_ancestor(
        session: AsyncSession,
        *,
        account_id: int,
        ancestor_account_id: int,
        is_testing: bool,
    ) -> bool:
        stmt = select(
            exists().where(
                FlatHive.account_id == account_id,
                FlatHive.ancestor_account_id == ancestor_account_id,
                FlatHive.is_testing.is_(is_testing),
            )
        )
        result = await session.execute(stmt)
        return bool(result.scalar_one())

