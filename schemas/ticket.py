from datetime import datetime
from typing import List, Optional
from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field


class TicketQuery(BaseModel):
    page: int = Query(1, description="Page Number, starts at 1")
    page_size: int = Query(10, description="Page Size")


class TicketCreateRequest(BaseModel):
    event_location_id: int


class TicketGenerateRequest(BaseModel):
    event_location_id: int
    quantity: int = Field(description="Number of tickets, between 1 and 1000")


class TicketUpdateRequest(BaseModel):
    event_location_id: Optional[int] = None
    code: Optional[str] = None
    is_used: Optional[bool] = None
    used_at: Optional[datetime] = None
    is_active: Optional[bool] = None


class TicketUseRequest(BaseModel):
    code: str


class TicketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_location_id: int
    code: str
    is_used: bool
    used_at: Optional[datetime] = None
    is_active: bool
    deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TicketListResponse(BaseModel):
    results: List[TicketResponse]


class TicketPageResponse(BaseModel):
    page: int
    page_size: int
    count: int
    page_count: int
    results: List[TicketResponse]


class TicketGenerateResponse(BaseModel):
    message: str
    tickets: List[TicketResponse]


class TicketActionResponse(BaseModel):
    message: str
    ticket: TicketResponse


class TicketStatisticsResponse(BaseModel):
    total: int
    used: int
    unused: int
    active: int
    usage_rate: float
