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
from schemas.common import COMMON_ERROR_RESPONSES, ConflictResponse
from schemas.sale import (
    SaleCreateRequest,
    SaleDateRangeQuery,
    SaleDetailListResponse,
    SaleDetailResponse,
    SaleDetailUpdateRequest,
    SaleListResponse,
    SaleMessageResponse,
    SalePageResponse,
    SaleQuery,
    SaleResponse,
    SaleStatisticsResponse,
    SaleUpdateRequest,
)
from services.sale import SaleService

router = APIRouter(prefix="/sales", tags=["Sales"])


def get_sale_service(db: Session = Depends(get_db_sync)) -> SaleService:
    return SaleService(db)


def sale_to_dict(sale) -> dict:
    return SaleResponse.model_validate(sale).model_dump(mode="json")


def sales_to_dict(sales) -> dict:
    return SaleListResponse(
        results=[SaleResponse.model_validate(s) for s in sales]
    ).model_dump(mode="json")


def detail_to_dict(detail) -> dict:
    return SaleDetailResponse.model_validate(detail).model_dump(mode="json")


def _internal_error(action: str, e: Exception):
    logger.exception(f"Error {action}: {e}")
    return common_response(InternalServerError(error=str(e)))


def _message(action, target_id: int, message: str, label: str):
    try:
        action(target_id)
        return common_response(
            Ok(data=SaleMessageResponse(message=message).model_dump())
        )
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error(label, e)


@router.post(
    "/",
    responses={
        "201": {"model": SaleResponse},
        "409": {"model": ConflictResponse},
        **COMMON_ERROR_RESPONSES,
    },
)
def create_sale(
    request: SaleCreateRequest, service: SaleService = Depends(get_sale_service)
):
    try:
        sale = service.create_sale(
            total_amount=request.total_amount,
            sale_details=[d.model_dump() for d in request.sale_details],
            user_id=request.user_id,
            partner_id=request.partner_id,
        )
        return common_response(Created(data=sale_to_dict(sale)))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("creating sale", e)


@router.get(
    "/", responses={"200": {"model": SalePageResponse}, **COMMON_ERROR_RESPONSES}
)
def list_sales(
    query: SaleQuery = Depends(), service: SaleService = Depends(get_sale_service)
):
    try:
        data = service.get_paginated(query.page - 1, query.page_size)
        page = SalePageResponse(
            page=query.page,
            page_size=query.page_size,
            count=data["total_count"],
            page_count=page_count(data["total_count"], query.page_size),
            results=[SaleResponse.model_validate(s) for s in data["items"]],
        )
        return common_response(Ok(data=page.model_dump(mode="json")))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("paginating sales", e)


@router.get("/all", responses={"200": {"model": SaleListResponse}})
def get_all_sales(service: SaleService = Depends(get_sale_service)):
    try:
        return common_response(Ok(data=sales_to_dict(service.get_all_sales())))
    except Exception as e:
        return _internal_error("fetching sales", e)


@router.get("/active", responses={"200": {"model": SaleListResponse}})
def get_active_sales(service: SaleService = Depends(get_sale_service)):
    try:
        return common_response(Ok(data=sales_to_dict(service.get_active_sales())))
    except Exception as e:
        return _internal_error("fetching active sales", e)


@router.get("/statistics", responses={"200": {"model": SaleStatisticsResponse}})
def get_sales_statistics(service: SaleService = Depends(get_sale_service)):
    try:
        data = SaleStatisticsResponse(**service.get_statistics())
        return common_response(Ok(data=data.model_dump(mode="json")))
    except Exception as e:
        return _internal_error("computing sales statistics", e)


@router.get("/date-range", responses={"200": {"model": SaleListResponse}})
def get_sales_by_date_range(
    query: SaleDateRangeQuery = Depends(),
    service: SaleService = Depends(get_sale_service),
):
    try:
        sales = service.get_sales_by_date_range(query.start_date, query.end_date)
        return common_response(Ok(data=sales_to_dict(sales)))
    except Exception as e:
        return _internal_error("fetching sales by date range", e)


@router.get("/user/{user_id}", responses={"200": {"model": SaleListResponse}})
def get_sales_by_user(user_id: int, service: SaleService = Depends(get_sale_service)):
    try:
        return common_response(Ok(data=sales_to_dict(service.get_sales_by_user_id(user_id))))
    except Exception as e:
        return _internal_error("fetching sales by user", e)


@router.get("/partner/{partner_id}", responses={"200": {"model": SaleListResponse}})
def get_sales_by_partner(
    partner_id: int, service: SaleService = Depends(get_sale_service)
):
    try:
        sales = service.get_sales_by_partner_id(partner_id)
        return common_response(Ok(data=sales_to_dict(sales)))
    except Exception as e:
        return _internal_error("fetching sales by partner", e)


@router.get(
    "/details/{detail_id}",
    responses={"200": {"model": SaleDetailResponse}, **COMMON_ERROR_RESPONSES},
)
def get_sale_detail(detail_id: int, service: SaleService = Depends(get_sale_service)):
    try:
        return common_response(Ok(data=detail_to_dict(service.get_sale_detail_by_id(detail_id))))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("fetching sale detail", e)


@router.put(
    "/details/{detail_id}",
    responses={"200": {"model": SaleDetailResponse}, **COMMON_ERROR_RESPONSES},
)
def update_sale_detail(
    detail_id: int,
    request: SaleDetailUpdateRequest,
    service: SaleService = Depends(get_sale_service),
):
    try:
        detail = service.update_sale_detail(
            detail_id, **request.model_dump(exclude_unset=True, exclude_none=True)
        )
        return common_response(Ok(data=detail_to_dict(detail)))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("updating sale detail", e)


@router.delete(
    "/details/{detail_id}",
    responses={"200": {"model": SaleMessageResponse}, **COMMON_ERROR_RESPONSES},
)
def delete_sale_detail(
    detail_id: int, service: SaleService = Depends(get_sale_service)
):
    return _message(
        service.soft_delete_sale_detail,
        detail_id,
        "Sale detail deleted successfully",
        "deleting sale detail",
    )


@router.post(
    "/details/{detail_id}/restore",
    responses={"200": {"model": SaleMessageResponse}, **COMMON_ERROR_RESPONSES},
)
def restore_sale_detail(
    detail_id: int, service: SaleService = Depends(get_sale_service)
):
    return _message(
        service.restore_sale_detail,
        detail_id,
        "Sale detail restored successfully",
        "restoring sale detail",
    )


@router.get(
    "/{sale_id}",
    responses={"200": {"model": SaleResponse}, **COMMON_ERROR_RESPONSES},
)
def get_sale(sale_id: int, service: SaleService = Depends(get_sale_service)):
    try:
        return common_response(Ok(data=sale_to_dict(service.get_sale_by_id(sale_id))))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("fetching sale", e)


@router.put(
    "/{sale_id}",
    responses={"200": {"model": SaleResponse}, **COMMON_ERROR_RESPONSES},
)
def update_sale(
    sale_id: int,
    request: SaleUpdateRequest,
    service: SaleService = Depends(get_sale_service),
):
    try:
        sale = service.update_sale(
            sale_id, **request.model_dump(exclude_unset=True, exclude_none=True)
        )
        return common_response(Ok(data=sale_to_dict(sale)))
    except TicketingError as e:
        return ticketing_error_response(e)
    except Exception as e:
        return _internal_error("updating sale", e)


@router.get("/{sale_id}/details", responses={"200": {"model": SaleDetailListResponse}})
def get_sale_details(sale_id: int, service: SaleService = Depends(get_sale_service)):
    try:
        details = service.get_sale_details_by_sale_id(sale_id)
        data = SaleDetailListResponse(
            results=[SaleDetailResponse.model_validate(d) for d in details]
        )
        return common_response(Ok(data=data.model_dump(mode="json")))
    except Exception as e:
        return _internal_error("fetching sale details", e)


@router.delete(
    "/{sale_id}",
    responses={"200": {"model": SaleMessageResponse}, **COMMON_ERROR_RESPONSES},
)
def delete_sale(sale_id: int, service: SaleService = Depends(get_sale_service)):
    return _message(
        service.soft_delete_sale, sale_id, "Sale deleted successfully", "deleting sale"
    )


@router.post(
    "/{sale_id}/activate",
    responses={"200": {"model": SaleMessageResponse}, **COMMON_ERROR_RESPONSES},
)
def activate_sale(sale_id: int, service: SaleService = Depends(get_sale_service)):
    return _message(
        service.activate_sale, sale_id, "Sale activated successfully", "activating sale"
    )


@router.post(
    "/{sale_id}/deactivate",
    responses={"200": {"model": SaleMessageResponse}, **COMMON_ERROR_RESPONSES},
)
def deactivate_sale(sale_id: int, service: SaleService = Depends(get_sale_service)):
    return _message(
        service.deactivate_sale,
        sale_id,
        "Sale deactivated successfully",
        "deactivating sale",
    )


@router.post(
    "/{sale_id}/restore",
    responses={"200": {"model": SaleMessageResponse}, **COMMON_ERROR_RESPONSES},
)
def restore_sale(sale_id: int, service: SaleService = Depends(get_sale_service)):
    return _message(
        service.restore_sale, sale_id, "Sale restored successfully", "restoring sale"
    )
