from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import Field, field_validator

from mms.models import AttendanceStatus, EventStatus
from mms.schemas import ObjectId, PageQuery, RequestSchema, SortOrder, require_future


class EventCreateSchema(RequestSchema):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=10, max_length=1000)
    eventDate: datetime
    location: str = Field(..., min_length=3, max_length=200)
    maxAttendees: int | None = Field(None, ge=1)
    registrationFee: float = Field(0, ge=0)

    @field_validator('eventDate')
    @classmethod
    def date_in_future(cls, value):
        return require_future(value, 'Event date must be in the future')


class EventUpdateSchema(RequestSchema):
    title: str | None = Field(None, min_length=3, max_length=200)
    description: str | None = Field(None, min_length=10, max_length=1000)
    eventDate: datetime | None = None
    location: str | None = Field(None, min_length=3, max_length=200)
    maxAttendees: int | None = Field(None, ge=1)
    registrationFee: float | None = Field(None, ge=0)
    status: EventStatus | None = None

    @field_validator('eventDate')
    @classmethod
    def date_in_future(cls, value):
        return require_future(value, 'Event date must be in the future')


class EventFilterSchema(PageQuery):
    status: EventStatus | None = None
    dateFrom: date | None = None
    dateTo: date | None = None
    search: str | None = Field(None, max_length=100)
    sortBy: Literal['title', 'eventDate', 'createdAt'] = 'eventDate'
    sortOrder: SortOrder = 'asc'


class EventRegistrationSchema(RequestSchema):
    memberId: ObjectId


class AttendanceSchema(RequestSchema):
    memberId: ObjectId
    attendanceStatus: AttendanceStatus
