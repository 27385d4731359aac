from __future__ import annotations

from typing import Literal

from pydantic import Field

from mms.models import MemberStatus, MembershipType
from mms.schemas import PageQuery, QuerySchema, RequestSchema, SortOrder


class ZoneCreateSchema(RequestSchema):
    name: str = Field(..., min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)


class ZoneUpdateSchema(RequestSchema):
    name: str | None = Field(None, min_length=2, max_length=100)
    description: str | None = Field(None, max_length=500)


class ZoneFilterSchema(PageQuery):
    search: str | None = Field(None, max_length=100)
    sortBy: Literal['name', 'createdAt'] = 'name'
    sortOrder: SortOrder = 'asc'


class ZoneSearchSchema(QuerySchema):
    search: str | None = Field(None, max_length=100)


class ZoneMembersSchema(PageQuery):
    status: MemberStatus | None = None
    membershipType: MembershipType | None = None
