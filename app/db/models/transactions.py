from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Index, Numeric, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_account_address_trx_at", "account_id", "address", "trx_at"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    account_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    address: Mapped[str] = mapped_column(String(64), nullable=False)
    product_slug: Mapped[str | None] = mapped_column(String(64), nullable=True)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(36, 18), nullable=False, server_default=text("0")
    )
    trx_hash: Mapped[str | None] = mapped_column(String(80), nullable=True)
    trx_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
