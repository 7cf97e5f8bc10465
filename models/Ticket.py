from datetime import datetime
from typing import Optional
from sqlalchemy import Boolean, DateTime, Index, Integer, String, text
from sqlalchemy.orm import mapped_column, Mapped
from models import Base, current_time


class Ticket(Base):
    __tablename__ = "ticket"
    __table_args__ = (
        # code is unique among live tickets only
        Index(
            "uq_ticket_code_not_deleted",
            "code",
            unique=True,
            postgresql_where=text("deleted = false"),
            sqlite_where=text("deleted = 0"),
        ),
    )

    id: Mapped[int] = mapped_column(
        "id", Integer, primary_key=True, index=True, autoincrement=True
    )
    event_location_id: Mapped[int] = mapped_column(
        "event_location_id", Integer, nullable=False, index=True
    )
    code: Mapped[str] = mapped_column("code", String(255), nullable=False)
    is_used: Mapped[bool] = mapped_column("is_used", Boolean, default=False)
    used_at: Mapped[Optional[datetime]] = mapped_column(
        "used_at", DateTime(timezone=True), nullable=True
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
