from __future__ import annotations

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Index, Integer, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class FlatHive(Base):
    """Transitive closure of the referral tree: one row per (member, ancestor)."""

    __tablename__ = "flat_hives"
    __table_args__ = (
        CheckConstraint("depth > 0", name="ck_flat_hives_depth_positive"),
        UniqueConstraint(
            "account_id",
            "ancestor_account_id",
            "is_testing",
            name="uq_flat_hives_account_ancestor_testing",
        ),
        Index("idx_flat_hives_ancestor", "ancestor_account_id", "is_testing"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    account_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    ancestor_account_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    depth: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("1"))
    is_testing: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
