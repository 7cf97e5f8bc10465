from typing import List, Sequence
from sqlalchemy.orm import Session
from core.code_generator import generate_unique_code
from core.exceptions import (
    AlreadyUsedError,
    DuplicateCodeError,
    InactiveError,
    InvalidQuantityError,
    NotFoundError,
)
from core.helper import get_current_time_in_timezone
from core.log import logger
from core.pagination import percentage
from models.Ticket import Ticket
from repository import ticket as ticketRepo
from settings import TICKET_BATCH_MAX_QUANTITY, TZ


class TicketService:
    """Issues tickets with unique codes and drives their lifecycle.

    Flags ``is_used``, ``is_active`` and ``deleted`` are independent. The
    service only exposes create, use, activate/deactivate and soft
    delete/restore transitions, and keeps ``used_at`` set if and only if
    ``is_used`` is true.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_ticket_by_id(self, ticket_id: int) -> Ticket:
        ticket = ticketRepo.get_ticket_by_id(self.db, ticket_id)
        if ticket is None:
            raise NotFoundError(f"Ticket with ID {ticket_id} not found")
        return ticket

    def get_ticket_by_code(self, code: str) -> Ticket:
        ticket = ticketRepo.get_ticket_by_code(self.db, code)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    def get_all_tickets(self) -> Sequence[Ticket]:
        return ticketRepo.get_tickets(self.db)

    def get_active_tickets(self) -> Sequence[Ticket]:
        return ticketRepo.get_tickets(self.db, is_active=True)

    def get_unused_tickets(self) -> Sequence[Ticket]:
        return ticketRepo.get_tickets(self.db, is_used=False, is_active=True)

    def get_used_tickets(self) -> Sequence[Ticket]:
        return ticketRepo.get_tickets(self.db, is_used=True)

    def get_tickets_by_event_location(self, event_location_id: int) -> Sequence[Ticket]:
        return ticketRepo.get_tickets(self.db, event_location_id=event_location_id)

    def get_paginated(self, page_index: int, page_size: int) -> dict:
        return ticketRepo.get_tickets_per_page(self.db, page_index, page_size)

    def create_ticket(self, event_location_id: int) -> Ticket:
        code = generate_unique_code(self.db)
        return ticketRepo.insert_ticket(self.db, event_location_id, code)

    def generate_tickets(self, event_location_id: int, quantity: int) -> List[Ticket]:
        if quantity < 1 or quantity > TICKET_BATCH_MAX_QUANTITY:
            raise InvalidQuantityError(
                f"Quantity must be between 1 and {TICKET_BATCH_MAX_QUANTITY}"
            )

        codes: List[str] = []
        taken = set()
        for _ in range(quantity):
            # also skip codes drawn earlier in this batch
            code = generate_unique_code(
                self.db,
                exists=lambda db, c: c in taken or ticketRepo.ticket_code_exists(db, c),
            )
            taken.add(code)
            codes.append(code)

        logger.info(
            f"Generating {quantity} tickets for event location {event_location_id}"
        )
        return ticketRepo.bulk_insert_tickets(self.db, event_location_id, codes)

    def update_ticket(self, ticket_id: int, **patch) -> Ticket:
        ticket = self.get_ticket_by_id(ticket_id)

        code = patch.get("code")
        if code:
            existing = ticketRepo.get_ticket_by_code(self.db, code, active_only=False)
            if existing is not None and existing.id != ticket.id:
                raise DuplicateCodeError(f'Code "{code}" is already in use')

        if "is_used" in patch or "used_at" in patch:
            is_used = patch.get("is_used", ticket.is_used)
            if is_used:
                patch["is_used"] = True
                patch["used_at"] = (
                    patch.get("used_at")
                    or ticket.used_at
                    or get_current_time_in_timezone(TZ)
                )
            else:
                patch["is_used"] = False
                patch["used_at"] = None

        return ticketRepo.update_ticket(self.db, ticket, **patch)

    def use_ticket_by_code(self, code: str) -> Ticket:
        ticket = ticketRepo.get_ticket_by_code(self.db, code, active_only=False)
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return self._use(ticket)

    def use_ticket_by_id(self, ticket_id: int) -> Ticket:
        return self._use(self.get_ticket_by_id(ticket_id))

    def _use(self, ticket: Ticket) -> Ticket:
        if ticket.is_used:
            raise AlreadyUsedError("Ticket has already been used")
        if not ticket.is_active:
            raise InactiveError("Ticket is not active")

        ticket_id = ticket.id
        if not ticketRepo.mark_ticket_used(self.db, ticket_id):
            # lost the race, report what the winner left behind
            current = ticketRepo.get_ticket_by_id(self.db, ticket_id)
            if current is None:
                raise NotFoundError(f"Ticket with ID {ticket_id} not found")
            if current.is_used:
                raise AlreadyUsedError("Ticket has already been used")
            raise InactiveError("Ticket is not active")

        return self.get_ticket_by_id(ticket_id)

    def activate_ticket(self, ticket_id: int) -> Ticket:
        return ticketRepo.set_ticket_active(
            self.db, self.get_ticket_by_id(ticket_id), True
        )

    def deactivate_ticket(self, ticket_id: int) -> Ticket:
        return ticketRepo.set_ticket_active(
            self.db, self.get_ticket_by_id(ticket_id), False
        )

    def soft_delete(self, ticket_id: int) -> Ticket:
        ticket = ticketRepo.get_ticket_by_id(self.db, ticket_id, include_deleted=True)
        if ticket is None:
            raise NotFoundError("Ticket does not exist")
        return ticketRepo.set_ticket_deleted(self.db, ticket, True)

    def restore(self, ticket_id: int) -> Ticket:
        # no uniqueness pre-check, the unique index still rejects a clash
        ticket = ticketRepo.get_ticket_by_id(self.db, ticket_id, include_deleted=True)
        if ticket is None:
            raise NotFoundError("Ticket does not exist")
        return ticketRepo.set_ticket_deleted(self.db, ticket, False)

    def get_statistics(self) -> dict:
        total = ticketRepo.count_tickets(self.db)
        used = ticketRepo.count_tickets(self.db, Ticket.is_used.is_(True))
        unused = ticketRepo.count_tickets(self.db, Ticket.is_used.is_(False))
        active = ticketRepo.count_tickets(self.db, Ticket.is_active.is_(True))
        return {
            "total": total,
            "used": used,
            "unused": unused,
            "active": active,
            "usage_rate": percentage(used, total),
        }
