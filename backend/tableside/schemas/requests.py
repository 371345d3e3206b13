"""Service request and billing request schemas."""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field

from tableside.models.requests import CompletionSource, RequestStatus, ServiceRequestType
from tableside.schemas.base import CamelModel

_TABLE_ALIASES = AliasChoices("table", "tableNumber", "table_number")


class ServiceRequestCreate(CamelModel):
    table_number: int = Field(alias="table", validation_alias=_TABLE_ALIASES)
    request_type: ServiceRequestType = Field(
        validation_alias=AliasChoices("requestType", "request_type", "request")
    )


class ServiceRequestResponse(CamelModel):
    id: int
    table_number: int = Field(alias="table")
    request_type: ServiceRequestType
    status: RequestStatus
    completed_by: Optional[CompletionSource] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class BillingRequestCreate(CamelModel):
    table_number: int = Field(alias="table", validation_alias=_TABLE_ALIASES)
    order_id: Optional[int] = None


class BillingRequestComplete(CamelModel):
    """Leave ``markOrderPaid`` out to use the server default."""

    mark_order_paid: Optional[bool] = None


class BillingRequestResponse(CamelModel):
    id: int
    table_number: int = Field(alias="table")
    order_id: Optional[int] = None
    status: RequestStatus
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
