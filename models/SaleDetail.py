from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.orm import mapped_column, Mapped
from models import Base, current_time


class SaleDetail(Base):
    __tablename__ = "sale_detail"

    id: Mapped[int] = mapped_column(
        "id", Integer, primary_key=True, index=True, autoincrement=True
    )
    sale_id: Mapped[int] = mapped_column(
        "sale_id", Integer, ForeignKey("sale.id"), nullable=False, index=True
    )
    ticket_id: Mapped[Optional[int]] = mapped_column(
        "ticket_id", Integer, ForeignKey("ticket.id"), nullable=True
    )
    amount: Mapped[Optional[Decimal]] = mapped_column(
        "amount", Numeric(10, 2), nullable=True
    )
    is_active: Mapped[bool] = mapped_column("is_active", Boolean, default=True)
    deleted: Mapped[bool] = mapped_column("deleted", Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        "created_at", DateTime(timezone=True), default=current_time
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updated_at",
        DateTime(timezone=True),
        default=current_time,
        onupdate=current_time,
    )
