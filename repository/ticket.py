from typing import Iterable, List, Optional, Sequence
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.exceptions import (
    BatchCreateFailedError,
    ConstraintViolationError,
    DuplicateCodeError,
)
from core.helper import get_current_time_in_timezone
from core.log import logger
from core.pagination import count_rows, paginate
from models.Ticket import Ticket
from settings import TZ


def _is_code_violation(e: IntegrityError) -> bool:
    message = str(e.orig).lower()
    return "code" in message or "uq_ticket_code_not_deleted" in message


def get_ticket_by_id(
    db: Session, ticket_id: int, include_deleted: bool = False
) -> Optional[Ticket]:
    stmt = select(Ticket).where(Ticket.id == ticket_id)
    if not include_deleted:
        stmt = stmt.where(Ticket.deleted.is_(False))
    return db.execute(stmt).scalar()


def get_ticket_by_code(
    db: Session, code: str, active_only: bool = True
) -> Optional[Ticket]:
    stmt = select(Ticket).where(Ticket.code == code, Ticket.deleted.is_(False))
    if active_only:
        stmt = stmt.where(Ticket.is_active)
    return db.execute(stmt).scalar()


def ticket_code_exists(db: Session, code: str) -> bool:
    stmt = select(Ticket.id).where(Ticket.code == code, Ticket.deleted.is_(False))
    return db.execute(stmt).first() is not None


def get_tickets(
    db: Session,
    event_location_id: Optional[int] = None,
    is_used: Optional[bool] = None,
    is_active: Optional[bool] = None,
) -> Sequence[Ticket]:
    stmt = select(Ticket).where(Ticket.deleted.is_(False))
    if event_location_id is not None:
        stmt = stmt.where(Ticket.event_location_id == event_location_id)
    if is_used is not None:
        stmt = stmt.where(Ticket.is_used.is_(is_used))
    if is_active is not None:
        stmt = stmt.where(Ticket.is_active.is_(is_active))
    stmt = stmt.order_by(Ticket.id)
    tickets = db.scalars(stmt).all()
    logger.debug(f"Fetched {len(tickets)} tickets")
    return tickets


def get_tickets_per_page(db: Session, page_index: int, page_size: int) -> dict:
    return paginate(db, Ticket, page_index, page_size)


def count_tickets(db: Session, *criteria) -> int:
    return count_rows(db, Ticket, *criteria)


def insert_ticket(db: Session, event_location_id: int, code: str) -> Ticket:
    ticket = Ticket(
        event_location_id=event_location_id,
        code=code,
        is_used=False,
        is_active=True,
        deleted=False,
    )
    try:
        db.add(ticket)
        db.commit()
        db.refresh(ticket)
    except IntegrityError as e:
        db.rollback()
        if _is_code_violation(e):
            logger.error(f"Ticket code {code} is already in use: {e.orig}")
            raise DuplicateCodeError(f'Code "{code}" is already in use')
        logger.error(f"Integrity constraint violation: {e.orig}")
        raise ConstraintViolationError(f"Ticket violates a constraint: {e.orig}")
    logger.info(f"Ticket created with ID: {ticket.id}")
    return ticket


def bulk_insert_tickets(
    db: Session, event_location_id: int, codes: Iterable[str]
) -> List[Ticket]:
    """Insert one ticket per code, all or nothing."""
    tickets = [
        Ticket(
            event_location_id=event_location_id,
            code=code,
            is_used=False,
            is_active=True,
            deleted=False,
        )
        for code in codes
    ]
    try:
        db.add_all(tickets)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Bulk ticket insert rolled back: {e.orig}")
        raise BatchCreateFailedError(
            f"Failed to create batch of {len(tickets)} tickets: {e.orig}"
        )
    for ticket in tickets:
        db.refresh(ticket)
    logger.info(
        f"Created {len(tickets)} tickets for event location {event_location_id}"
    )
    return tickets


def update_ticket(db: Session, ticket: Ticket, **fields) -> Ticket:
    for key, value in fields.items():
        setattr(ticket, key, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_code_violation(e):
            logger.error(f"Ticket {ticket.id} update collides on code: {e.orig}")
            raise DuplicateCodeError(
                f'Code "{fields.get("code", ticket.code)}" is already in use'
            )
        logger.error(f"Integrity constraint violation: {e.orig}")
        raise ConstraintViolationError(f"Ticket violates a constraint: {e.orig}")
    db.refresh(ticket)
    logger.info(f"Ticket with ID: {ticket.id} updated successfully")
    return ticket


def mark_ticket_used(db: Session, ticket_id: int) -> bool:
    """Flip a live, active, unused ticket to used in one conditional UPDATE.

    Returns True only for the caller whose UPDATE matched the row, so at most
    one caller ever moves a ticket from unused to used.
    """
    now = get_current_time_in_timezone(TZ)
    stmt = (
        update(Ticket)
        .where(
            Ticket.id == ticket_id,
            Ticket.is_used.is_(False),
            Ticket.is_active.is_(True),
            Ticket.deleted.is_(False),
        )
        .values(is_used=True, used_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    db.commit()
    used = result.rowcount == 1
    if used:
        logger.info(f"Ticket with ID: {ticket_id} marked as used")
    else:
        logger.warning(f"Ticket with ID: {ticket_id} was not in a usable state")
    return used


def set_ticket_active(db: Session, ticket: Ticket, is_active: bool) -> Ticket:
    return update_ticket(db, ticket, is_active=is_active)


def set_ticket_deleted(db: Session, ticket: Ticket, deleted: bool) -> Ticket:
    return update_ticket(db, ticket, deleted=deleted)
