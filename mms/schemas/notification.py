from __future__ import annotations

from pydantic import Field

from mms.models import NotificationPriority, NotificationStatus, NotificationType
from mms.schemas import ObjectId, PageQuery, RequestSchema


class NotificationCreateSchema(RequestSchema):
    title: str = Field(..., min_length=3, max_length=200)
    message: str = Field(..., min_length=10, max_length=1000)
    type: NotificationType
    priority: NotificationPriority = NotificationPriority.MEDIUM
    targetMembers: list[ObjectId] = Field(default_factory=list)
    status: NotificationStatus = NotificationStatus.SENT


class SendToAllSchema(RequestSchema):
    title: str = Field(..., min_length=3, max_length=200)
    message: str = Field(..., min_length=10, max_length=1000)
    type: NotificationType = NotificationType.GENERAL
    priority: NotificationPriority = NotificationPriority.MEDIUM


class SendToMembersSchema(SendToAllSchema):
    targetMembers: list[ObjectId] = Field(..., min_length=1)


class NotificationFilterSchema(PageQuery):
    type: NotificationType | None = None
    priority: NotificationPriority | None = None
    status: NotificationStatus | None = None
    unreadOnly: bool = False
    limit: int = Field(10, ge=1, le=50)
