from __future__ import annotations

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime, Index, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Hive(Base):
    __tablename__ = "hives"
    __table_args__ = (
        CheckConstraint("beacon_points >= 0", name="ck_hives_beacon_points_non_negative"),
        CheckConstraint(
            "referrer_account_id <> account_id",
            name="ck_hives_no_self_referral",
        ),
        Index("idx_hives_account_testing", "account_id", "is_testing"),
        Index("idx_hives_referrer", "referrer_account_id"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    account_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    # 0 means the member joined without a referrer.
    referrer_account_id: Mapped[int] = mapped_column(
        BigInteger, nullable=False, server_default=text("0")
    )
    beacon_points: Mapped[int] = mapped_column(
        BigInteger, nullable=False, server_default=text("0")
    )
    active_status: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    trial_ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    is_testing: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
