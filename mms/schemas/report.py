from __future__ import annotations

from datetime import date

from pydantic import Field

from mms.models import (
    EventStatus,
    MemberStatus,
    MembershipType,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from mms.schemas import ObjectId, PageQuery, QuerySchema


class DateRangeQuery(QuerySchema):
    dateFrom: date | None = None
    dateTo: date | None = None


class MemberReportSchema(DateRangeQuery):
    zone: ObjectId | None = None
    membershipType: MembershipType | None = None
    status: MemberStatus | None = None


class PaymentReportSchema(DateRangeQuery, PageQuery):
    paymentType: PaymentType | None = None
    memberId: ObjectId | None = None
    status: PaymentStatus | None = None
    paymentMethod: PaymentMethod | None = None
    limit: int = Field(50, ge=1, le=100)


class EventReportSchema(DateRangeQuery):
    status: EventStatus | None = None
