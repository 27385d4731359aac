from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mms.models import MemberStatus, MembershipType, PaymentMethod
from mms.schemas import (
    ObjectId,
    PageQuery,
    PhoneNumber,
    QuerySchema,
    RequestSchema,
    SortOrder,
    require_future,
    require_past,
)


class AddressSchema(BaseModel):
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)

    street: str | None = None
    city: str | None = None
    state: str | None = None
    zipCode: str | None = None
    country: str | None = None


class MemberCreateSchema(RequestSchema):
    userId: ObjectId
    name: str = Field(..., min_length=2, max_length=100)
    phone: PhoneNumber
    address: AddressSchema | None = None
    zoneId: ObjectId
    membershipType: MembershipType
    dateOfBirth: date | None = None
    renewalDate: datetime

    @field_validator('dateOfBirth')
    @classmethod
    def birth_not_future(cls, value):
        return require_past(value, 'Date of birth cannot be in the future')

    @field_validator('renewalDate')
    @classmethod
    def renewal_in_future(cls, value):
        return require_future(value, 'Renewal date must be in the future')


class MemberUpdateSchema(RequestSchema):
    name: str | None = Field(None, min_length=2, max_length=100)
    phone: PhoneNumber | None = None
    address: AddressSchema | None = None
    zoneId: ObjectId | None = None
    membershipType: MembershipType | None = None
    status: MemberStatus | None = None
    dateOfBirth: date | None = None
    renewalDate: datetime | None = None

    @field_validator('dateOfBirth')
    @classmethod
    def birth_not_future(cls, value):
        return require_past(value, 'Date of birth cannot be in the future')

    @field_validator('renewalDate')
    @classmethod
    def renewal_in_future(cls, value):
        return require_future(value, 'Renewal date must be in the future')


class MemberFilterSchema(PageQuery):
    zone: ObjectId | None = None
    status: MemberStatus | None = None
    membershipType: MembershipType | None = None
    search: str | None = Field(None, max_length=100)
    sortBy: Literal['name', 'memberId', 'joinDate', 'renewalDate', 'createdAt'] = 'createdAt'
    sortOrder: SortOrder = 'desc'


class MemberSearchSchema(QuerySchema):
    search: str | None = Field(None, max_length=100)


class ExpiringMembersSchema(PageQuery):
    days: int = Field(30, ge=1, le=365)


class RenewMembershipSchema(RequestSchema):
    renewalPeriod: int = Field(..., ge=1, le=60)
    paymentAmount: float = Field(..., ge=0)
    paymentMethod: PaymentMethod
    transactionId: str | None = Field(None, max_length=100)


class ExtendMembershipSchema(RequestSchema):
    newRenewalDate: datetime
    reason: str | None = Field(None, max_length=500)

    @field_validator('newRenewalDate')
    @classmethod
    def renewal_in_future(cls, value):
        return require_future(value, 'New renewal date must be in the future')
