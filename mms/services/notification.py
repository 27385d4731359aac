"""Notifications: targeted or broadcast messages to members."""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import or_, select

from mms.extensions import db
from mms.models import (
    Member,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    notification_target,
)
from mms.services.errors import AuthorizationError, NotFoundError, ValidationError
from mms.services.helpers import paginate


def _visible_to(member_id: str):
    """Sent notifications targeting the member, plus broadcasts."""
    targeted = select(notification_target.c.notification_id).where(
        notification_target.c.member_id == member_id
    )
    has_targets = select(notification_target.c.notification_id)
    return (
        Notification.is_active.is_(True),
        Notification.status == NotificationStatus.SENT,
        or_(Notification.id.in_(targeted), Notification.id.not_in(has_targets)),
    )


class NotificationService:

    def _resolve_targets(self, member_ids: list[str]) -> list[Member]:
        unique_ids = list(dict.fromkeys(member_ids))
        if not unique_ids:
            return []
        members = list(db.session.execute(
            select(Member).where(Member.id.in_(unique_ids), Member.is_active.is_(True))
        ).scalars())
        if len(members) != len(unique_ids):
            raise ValidationError('One or more target members not found')
        return members

    def create_notification(self, data: dict[str, Any], sent_by: str) -> Notification:
        """
        Create a notification. An empty target list makes it a broadcast.

        Raises:
            ValidationError: If any target member is missing or disabled
        """
        targets = self._resolve_targets(data.get('targetMembers') or [])
        notification = Notification(
            title=data['title'],
            message=data['message'],
            type=NotificationType(data.get('type') or NotificationType.GENERAL),
            priority=NotificationPriority(data.get('priority') or NotificationPriority.MEDIUM),
            status=NotificationStatus(data.get('status') or NotificationStatus.SENT),
            target_members=targets,
            sent_by=sent_by,
        )
        db.session.add(notification)
        db.session.commit()
        audience = f"{len(targets)} member(s)" if targets else "all members"
        current_app.logger.info(f"Notification {notification.title!r} sent to {audience}")
        return notification

    def get_all_notifications(self, filters: dict[str, Any]) -> tuple[list[Notification], dict[str, Any]]:
        stmt = select(Notification).where(Notification.is_active.is_(True))
        if filters.get('type'):
            stmt = stmt.where(Notification.type == NotificationType(filters['type']))
        if filters.get('priority'):
            stmt = stmt.where(Notification.priority == NotificationPriority(filters['priority']))
        if filters.get('status'):
            stmt = stmt.where(Notification.status == NotificationStatus(filters['status']))
        stmt = stmt.order_by(Notification.sent_at.desc(), Notification.id)
        return paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalNotifications')

    def get_notification_by_id(self, id: str) -> Notification:
        notification = db.session.get(Notification, id)
        if notification is None or not notification.is_active:
            raise NotFoundError('Notification not found')
        return notification

    def ensure_visible(self, notification: Notification, member: Member) -> None:
        """Members may only open notifications addressed to them or broadcast."""
        if notification.status != NotificationStatus.SENT:
            raise AuthorizationError('Access denied. Insufficient permissions.')
        if notification.target_members and member not in notification.target_members:
            raise AuthorizationError('Access denied. Insufficient permissions.')

    def delete_notification(self, id: str) -> Notification:
        notification = db.session.get(Notification, id)
        if notification is None:
            raise NotFoundError('Notification not found')
        notification.is_active = False
        db.session.commit()
        return notification

    def get_member_notifications(self, member_id: str, filters: dict[str, Any]):
        member = db.session.get(Member, member_id)
        if member is None or not member.is_active:
            raise NotFoundError('Member not found')

        stmt = select(Notification).where(*_visible_to(member.id))
        if filters.get('unreadOnly'):
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.order_by(Notification.sent_at.desc(), Notification.id)
        return paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalNotifications')

    def send_to_all_members(
        self,
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.GENERAL,
        priority: NotificationPriority | str = NotificationPriority.MEDIUM,
        sent_by: str | None = None,
    ) -> Notification:
        return self.create_notification(
            {'title': title, 'message': message, 'type': type, 'priority': priority, 'targetMembers': []},
            sent_by,
        )

    def send_to_members(
        self,
        target_members: list[str],
        title: str,
        message: str,
        type: NotificationType | str = NotificationType.GENERAL,
        priority: NotificationPriority | str = NotificationPriority.MEDIUM,
        sent_by: str | None = None,
    ) -> Notification:
        if not target_members:
            raise ValidationError('At least one target member is required')
        return self.create_notification(
            {
                'title': title,
                'message': message,
                'type': type,
                'priority': priority,
                'targetMembers': target_members,
            },
            sent_by,
        )

    def mark_as_read(self, id: str, member: Member) -> Notification:
        notification = self.get_notification_by_id(id)
        self.ensure_visible(notification, member)
        if not notification.is_read:
            notification.is_read = True
            db.session.commit()
        return notification


notification_service = NotificationService()

__all__ = ["NotificationService", "notification_service"]
