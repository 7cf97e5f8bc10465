from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import Boolean, DateTime, Integer, Numeric
from sqlalchemy.orm import mapped_column, Mapped, relationship
from models import Base, current_time


class Sale(Base):
    __tablename__ = "sale"

    id: Mapped[int] = mapped_column(
        "id", Integer, primary_key=True, index=True, autoincrement=True
    )
    user_id: Mapped[Optional[int]] = mapped_column("user_id", Integer, nullable=True)
    partner_id: Mapped[Optional[int]] = mapped_column(
        "partner_id", Integer, nullable=True
    )
    total_amount: Mapped[Optional[Decimal]] = mapped_column(
        "total_amount", Numeric(10, 2), nullable=True
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

    # live details only, written through repository.sale
    sale_details: Mapped[List["SaleDetail"]] = relationship(  # noqa: F821
        "SaleDetail",
        primaryjoin="and_(Sale.id == SaleDetail.sale_id, SaleDetail.deleted == False)",  # noqa: E712
        order_by="SaleDetail.id",
        viewonly=True,
        lazy="selectin",
    )
