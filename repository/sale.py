from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence, Tuple
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.exceptions import ConstraintViolationError
from core.helper import to_timezone
from core.log import logger
from core.pagination import count_rows, paginate
from models.Sale import Sale
from models.SaleDetail import SaleDetail
from settings import TZ

TWO_PLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0").quantize(TWO_PLACES)
    return Decimal(str(value)).quantize(TWO_PLACES)


def _commit_or_raise(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Integrity constraint violation on {what}: {e.orig}")
        raise ConstraintViolationError(f"{what} violates a constraint: {e.orig}")


def _as_stored_time(db: Session, value: datetime) -> datetime:
    # created_at is written in TZ; sqlite keeps only the wall clock
    value = to_timezone(value, TZ)
    if db.get_bind().dialect.name == "sqlite":
        return value.replace(tzinfo=None)
    return value


def get_sale_by_id(
    db: Session, sale_id: int, include_deleted: bool = False
) -> Optional[Sale]:
    stmt = select(Sale).where(Sale.id == sale_id)
    if not include_deleted:
        stmt = stmt.where(Sale.deleted.is_(False))
    return db.execute(stmt).scalar()


def get_sales(
    db: Session,
    user_id: Optional[int] = None,
    partner_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> Sequence[Sale]:
    stmt = select(Sale).where(Sale.deleted.is_(False))
    if user_id is not None:
        stmt = stmt.where(Sale.user_id == user_id)
    if partner_id is not None:
        stmt = stmt.where(Sale.partner_id == partner_id)
    if is_active is not None:
        stmt = stmt.where(Sale.is_active.is_(is_active))
    if start_date is not None:
        stmt = stmt.where(Sale.created_at >= _as_stored_time(db, start_date))
    if end_date is not None:
        stmt = stmt.where(Sale.created_at <= _as_stored_time(db, end_date))
    stmt = stmt.order_by(Sale.created_at.desc(), Sale.id.desc())
    sales = db.scalars(stmt).all()
    logger.debug(f"Fetched {len(sales)} sales")
    return sales


def get_sales_per_page(db: Session, page_index: int, page_size: int) -> dict:
    return paginate(db, Sale, page_index, page_size)


def count_sales(db: Session, *criteria) -> int:
    return count_rows(db, Sale, *criteria)


def get_sales_revenue(db: Session) -> Tuple[Decimal, Decimal]:
    """SUM and AVG of total_amount over non-deleted sales, 0 when empty."""
    stmt = select(
        func.coalesce(func.sum(Sale.total_amount), 0),
        func.coalesce(func.avg(Sale.total_amount), 0),
    ).where(Sale.deleted.is_(False))
    total, average = db.execute(stmt).one()
    return to_money(total), to_money(average)


def insert_sale(
    db: Session,
    total_amount: Decimal,
    user_id: Optional[int] = None,
    partner_id: Optional[int] = None,
    is_commit: bool = True,
) -> Sale:
    sale = Sale(
        user_id=user_id,
        partner_id=partner_id,
        total_amount=total_amount,
        is_active=True,
        deleted=False,
    )
    db.add(sale)
    if is_commit:
        _commit_or_raise(db, "Sale")
        db.refresh(sale)
    else:
        db.flush()
    logger.info(f"Sale created with ID: {sale.id}")
    return sale


def insert_sale_detail(
    db: Session,
    sale_id: int,
    amount: Decimal,
    ticket_id: Optional[int] = None,
    is_commit: bool = True,
) -> SaleDetail:
    detail = SaleDetail(
        sale_id=sale_id,
        ticket_id=ticket_id,
        amount=amount,
        is_active=True,
        deleted=False,
    )
    db.add(detail)
    if is_commit:
        _commit_or_raise(db, "Sale detail")
        db.refresh(detail)
    else:
        db.flush()
    logger.info(f"Sale detail created with ID: {detail.id} for sale {sale_id}")
    return detail


def update_sale(db: Session, sale: Sale, **fields) -> Sale:
    for key, value in fields.items():
        setattr(sale, key, value)
    _commit_or_raise(db, "Sale")
    db.refresh(sale)
    logger.info(f"Sale with ID: {sale.id} updated successfully")
    return sale


def get_sale_detail_by_id(
    db: Session, detail_id: int, include_deleted: bool = False
) -> Optional[SaleDetail]:
    stmt = select(SaleDetail).where(SaleDetail.id == detail_id)
    if not include_deleted:
        stmt = stmt.where(SaleDetail.deleted.is_(False))
    return db.execute(stmt).scalar()


def get_sale_details_by_sale_id(db: Session, sale_id: int) -> Sequence[SaleDetail]:
    stmt = (
        select(SaleDetail)
        .where(SaleDetail.sale_id == sale_id, SaleDetail.deleted.is_(False))
        .order_by(SaleDetail.id)
    )
    return db.scalars(stmt).all()


def update_sale_detail(db: Session, detail: SaleDetail, **fields) -> SaleDetail:
    for key, value in fields.items():
        setattr(detail, key, value)
    _commit_or_raise(db, "Sale detail")
    db.refresh(detail)
    logger.info(f"Sale detail with ID: {detail.id} updated successfully")
    return detail
