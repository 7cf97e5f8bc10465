from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.exceptions import TicketingError
from core.log import logger
from core.pagination import page_count
from core.responses import (
    Created,
    InternalServerError,
    Ok,
    common_response,
    ticketing_error_response,
)
from models import get_db_sync
from models.Ticket import Ticket
from schemas.common import COMMON_ERROR_RESPONSES, ConflictResponse
from schemas.ticket import (
    TicketActionResponse,
    TicketCreateRequest,
    TicketGenerateRequest,
    TicketGenerateResponse,
    TicketListResponse,
    TicketPageResponse,
    TicketQuery,
    TicketResponse,
    TicketStatisticsResponse,
    TicketUpdateRequest,
    TicketUseRequest,
)
from services.ticket import TicketService

router = APIRouter(prefix="/ticket", tags=["Ticket"])


def get_ticket_service(db: Session = Depends(get_db_sync)) -> TicketService:
    return TicketService(db)


def ticket_to_dict(ticket: Ticket) -> dict:
    return TicketResponse.model_validate(ticket).model_dump(mode="json")


def tickets_to_dict(tickets) -> dict:
    return TicketListResponse(
        results=[TicketResponse.model_validate(t) for t in tickets]
    ).model_dump(mode="json")


def _internal_error(action: str, e: Exception):
    logger.exception(f"Error {action}: {e}")
    return common_response(InternalServerError(error=str(e)))


@router.post(
    "/",
    responses={
        "201": {"model": TicketResponse},
        "409": {"model": ConflictResponse},
        **COMMON_ERROR_RESPONSES,
    },
)
def create_ticket(
    request: TicketCreateRequest,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        ticket = service.create_ticket(request.event_location_id)
        return common_response(Created(data=ticket_to_dict(ticket)))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("creating ticket", e)


@router.post(
    "/generate",
    responses={"201": {"model": TicketGenerateResponse}, **COMMON_ERROR_RESPONSES},
)
def generate_tickets(
    request: TicketGenerateRequest,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        tickets = service.generate_tickets(request.event_location_id, request.quantity)
        data = TicketGenerateResponse(
            message=f"{len(tickets)} tickets generated successfully",
            tickets=[TicketResponse.model_validate(t) for t in tickets],
        )
        return common_response(Created(data=data.model_dump(mode="json")))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("generating tickets", e)


@router.post(
    "/use",
    responses={"200": {"model": TicketActionResponse}, **COMMON_ERROR_RESPONSES},
)
def use_ticket(
    request: TicketUseRequest,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        ticket = service.use_ticket_by_code(request.code)
        data = TicketActionResponse(
            message="Ticket used successfully",
            ticket=TicketResponse.model_validate(ticket),
        )
        return common_response(Ok(data=data.model_dump(mode="json")))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("using ticket", e)


@router.get(
    "/", responses={"200": {"model": TicketPageResponse}, **COMMON_ERROR_RESPONSES}
)
def list_tickets(
    query: TicketQuery = Depends(),
    service: TicketService = Depends(get_ticket_service),
):
    try:
        data = service.get_paginated(query.page - 1, query.page_size)
        page = TicketPageResponse(
            page=query.page,
            page_size=query.page_size,
            count=data["total_count"],
            page_count=page_count(data["total_count"], query.page_size),
            results=[TicketResponse.model_validate(t) for t in data["items"]],
        )
        return common_response(Ok(data=page.model_dump(mode="json")))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("paginating tickets", e)


@router.get("/all", responses={"200": {"model": TicketListResponse}})
def get_all_tickets(service: TicketService = Depends(get_ticket_service)):
    try:
        return common_response(Ok(data=tickets_to_dict(service.get_all_tickets())))
    except Exception as e:
        return _internal_error("fetching tickets", e)


@router.get("/active", responses={"200": {"model": TicketListResponse}})
def get_active_tickets(service: TicketService = Depends(get_ticket_service)):
    try:
        return common_response(Ok(data=tickets_to_dict(service.get_active_tickets())))
    except Exception as e:
        return _internal_error("fetching active tickets", e)


@router.get("/unused", responses={"200": {"model": TicketListResponse}})
def get_unused_tickets(service: TicketService = Depends(get_ticket_service)):
    try:
        return common_response(Ok(data=tickets_to_dict(service.get_unused_tickets())))
    except Exception as e:
        return _internal_error("fetching unused tickets", e)


@router.get("/used", responses={"200": {"model": TicketListResponse}})
def get_used_tickets(service: TicketService = Depends(get_ticket_service)):
    try:
        return common_response(Ok(data=tickets_to_dict(service.get_used_tickets())))
    except Exception as e:
        return _internal_error("fetching used tickets", e)


@router.get("/statistics", responses={"200": {"model": TicketStatisticsResponse}})
def get_ticket_statistics(service: TicketService = Depends(get_ticket_service)):
    try:
        data = TicketStatisticsResponse(**service.get_statistics())
        return common_response(Ok(data=data.model_dump(mode="json")))
    except Exception as e:
        return _internal_error("computing ticket statistics", e)


@router.get(
    "/code/{code}",
    responses={"200": {"model": TicketResponse}, **COMMON_ERROR_RESPONSES},
)
def get_ticket_by_code(code: str, service: TicketService = Depends(get_ticket_service)):
    try:
        return common_response(Ok(data=ticket_to_dict(service.get_ticket_by_code(code))))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("fetching ticket by code", e)


@router.get(
    "/event-location/{event_location_id}",
    responses={"200": {"model": TicketListResponse}},
)
def get_tickets_by_event_location(
    event_location_id: int, service: TicketService = Depends(get_ticket_service)
):
    try:
        tickets = service.get_tickets_by_event_location(event_location_id)
        return common_response(Ok(data=tickets_to_dict(tickets)))
    except Exception as e:
        return _internal_error("fetching tickets by event location", e)


@router.get(
    "/{ticket_id}",
    responses={"200": {"model": TicketResponse}, **COMMON_ERROR_RESPONSES},
)
def get_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    try:
        return common_response(Ok(data=ticket_to_dict(service.get_ticket_by_id(ticket_id))))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("fetching ticket", e)


@router.put(
    "/{ticket_id}",
    responses={
        "200": {"model": TicketResponse},
        "409": {"model": ConflictResponse},
        **COMMON_ERROR_RESPONSES,
    },
)
def update_ticket(
    ticket_id: int,
    request: TicketUpdateRequest,
    service: TicketService = Depends(get_ticket_service),
):
    try:
        ticket = service.update_ticket(
            ticket_id, **request.model_dump(exclude_unset=True, exclude_none=True)
        )
        return common_response(Ok(data=ticket_to_dict(ticket)))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("updating ticket", e)


@router.post(
    "/{ticket_id}/use",
    responses={"200": {"model": TicketActionResponse}, **COMMON_ERROR_RESPONSES},
)
def use_ticket_by_id(
    ticket_id: int, service: TicketService = Depends(get_ticket_service)
):
    try:
        ticket = service.use_ticket_by_id(ticket_id)
        data = TicketActionResponse(
            message="Ticket used successfully",
            ticket=TicketResponse.model_validate(ticket),
        )
        return common_response(Ok(data=data.model_dump(mode="json")))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("using ticket", e)


def _ticket_action(action, ticket_id: int, message: str, label: str):
    try:
        ticket = action(ticket_id)
        data = TicketActionResponse(
            message=message, ticket=TicketResponse.model_validate(ticket)
        )
        return common_response(Ok(data=data.model_dump(mode="json")))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error(label, e)


@router.post(
    "/{ticket_id}/activate",
    responses={"200": {"model": TicketActionResponse}, **COMMON_ERROR_RESPONSES},
)
def activate_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return _ticket_action(
        service.activate_ticket, ticket_id, "Ticket activated successfully", "activating ticket"
    )


@router.post(
    "/{ticket_id}/deactivate",
    responses={"200": {"model": TicketActionResponse}, **COMMON_ERROR_RESPONSES},
)
def deactivate_ticket(
    ticket_id: int, service: TicketService = Depends(get_ticket_service)
):
    return _ticket_action(
        service.deactivate_ticket,
        ticket_id,
        "Ticket deactivated successfully",
        "deactivating ticket",
    )


@router.post(
    "/{ticket_id}/restore",
    responses={
        "200": {"model": TicketActionResponse},
        "409": {"model": ConflictResponse},
        **COMMON_ERROR_RESPONSES,
    },
)
def restore_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return _ticket_action(
        service.restore, ticket_id, "Ticket restored successfully", "restoring ticket"
    )


@router.delete(
    "/{ticket_id}",
    responses={"200": {"model": TicketActionResponse}, **COMMON_ERROR_RESPONSES},
)
def delete_ticket(ticket_id: int, service: TicketService = Depends(get_ticket_service)):
    return _ticket_action(
        service.soft_delete, ticket_id, "Ticket deleted successfully", "deleting ticket"
    )
