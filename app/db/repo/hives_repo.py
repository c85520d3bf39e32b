from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.hives import Hive
from app.hive.errors import HiveIntegrityError


class HivesRepo:
    @staticmethod
    async def get_one(
        session: AsyncSession,
        *,
        hive_id: int,
        is_testing: bool,
    ) -> Hive | None:
        # Two rows are fetched so a duplicate id is reported instead of hidden.
        stmt = (
            select(Hive)
            .where(
                Hive.id == hive_id,
                Hive.is_testing.is_(is_testing),
            )
            .limit(2)
        )
        result = await session.execute(stmt)
        rows = list(result.scalars().all())
        if len(rows) > 1:
            raise HiveIntegrityError(f"hive {hive_id} matched {len(rows)} rows")
        return rows[0] if rows else None
