from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import Field

from mms.models import PaymentMethod, PaymentStatus, PaymentType
from mms.schemas import ObjectId, PageQuery, RequestSchema, SortOrder


class PaymentCreateSchema(RequestSchema):
    memberId: ObjectId
    amount: float = Field(..., gt=0)
    paymentType: PaymentType
    paymentMethod: PaymentMethod
    description: str | None = Field(None, max_length=500)
    eventId: ObjectId | None = None
    transactionId: str | None = Field(None, max_length=100)


class PaymentUpdateSchema(RequestSchema):
    status: PaymentStatus | None = None
    transactionId: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=500)


class PaymentFilterSchema(PageQuery):
    memberId: ObjectId | None = None
    paymentType: PaymentType | None = None
    status: PaymentStatus | None = None
    eventId: ObjectId | None = None
    dateFrom: date | None = None
    dateTo: date | None = None
    sortBy: Literal['paymentDate', 'amount', 'createdAt'] = 'paymentDate'
    sortOrder: SortOrder = 'desc'
