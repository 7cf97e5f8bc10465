from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field, field_serializer

Money = Annotated[Decimal, Field(decimal_places=2)]


class SaleQuery(BaseModel):
    page: int = Query(1, description="Page Number, starts at 1")
    page_size: int = Query(10, description="Page Size")


class SaleDateRangeQuery(BaseModel):
    start_date: datetime = Query(..., description="Created at or after")
    end_date: datetime = Query(..., description="Created at or before")


class SaleDetailCreateRequest(BaseModel):
    ticket_id: Optional[int] = None
    amount: Money


class SaleCreateRequest(BaseModel):
    user_id: Optional[int] = None
    partner_id: Optional[int] = None
    total_amount: Money
    sale_details: List[SaleDetailCreateRequest] = []


class SaleUpdateRequest(BaseModel):
    user_id: Optional[int] = None
    partner_id: Optional[int] = None
    total_amount: Optional[Money] = None
    is_active: Optional[bool] = None


class SaleDetailUpdateRequest(BaseModel):
    ticket_id: Optional[int] = None
    amount: Optional[Money] = None
    is_active: Optional[bool] = None


class SaleDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sale_id: int
    ticket_id: Optional[int] = None
    amount: Optional[Decimal] = None
    is_active: bool
    deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("amount")
    def serialize_amount(self, amount: Optional[Decimal]) -> Optional[float]:
        return float(amount) if amount is not None else None


class SaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[int] = None
    partner_id: Optional[int] = None
    total_amount: Optional[Decimal] = None
    is_active: bool
    deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    sale_details: List[SaleDetailResponse] = []

    @field_serializer("total_amount")
    def serialize_total_amount(self, amount: Optional[Decimal]) -> Optional[float]:
        return float(amount) if amount is not None else None


class SaleListResponse(BaseModel):
    results: List[SaleResponse]


class SaleDetailListResponse(BaseModel):
    results: List[SaleDetailResponse]


class SalePageResponse(BaseModel):
    page: int
    page_size: int
    count: int
    page_count: int
    results: List[SaleResponse]


class SaleMessageResponse(BaseModel):
    message: str


class SaleStatisticsResponse(BaseModel):
    total_sales: int
    active_sales: int
    total_revenue: Decimal
    average_sale_amount: Decimal

    @field_serializer("total_revenue", "average_sale_amount")
    def serialize_money(self, amount: Decimal) -> float:
        return float(amount)
