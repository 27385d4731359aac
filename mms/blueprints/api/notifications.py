"""Notification endpoints."""

from __future__ import annotations

from flask import Blueprint, g

from mms.blueprints.api.validation import (
    body_data,
    query_data,
    validate_body,
    validate_object_ids,
    validate_query,
)
from mms.models import UserRole
from mms.responses import success_response
from mms.schemas.notification import (
    NotificationCreateSchema,
    NotificationFilterSchema,
    SendToAllSchema,
    SendToMembersSchema,
)
from mms.security import roles_required, token_required
from mms.services.errors import NotFoundError
from mms.services.notification import notification_service
from mms.services.serializers import serialize_notification

notifications_bp = Blueprint('notifications', __name__)


def _caller_member():
    member = g.current_user.member
    if member is None or not member.is_active:
        raise NotFoundError('Member profile not found')
    return member


@notifications_bp.route('', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_body(NotificationCreateSchema)
def create_notification():
    notification = notification_service.create_notification(body_data(), g.current_user.id)
    return success_response(
        'Notification created successfully',
        {'notification': serialize_notification(notification)},
        201,
    )


@notifications_bp.route('', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(NotificationFilterSchema)
def list_notifications():
    notifications, pagination = notification_service.get_all_notifications(query_data())
    return success_response(
        'Notifications retrieved successfully',
        [serialize_notification(n) for n in notifications],
        meta=pagination,
    )


@notifications_bp.route('/my', methods=['GET'])
@token_required
@roles_required(UserRole.MEMBER)
@validate_query(NotificationFilterSchema)
def my_notifications():
    member = _caller_member()
    notifications, pagination = notification_service.get_member_notifications(member.id, query_data())
    return success_response(
        'Notifications retrieved successfully',
        [serialize_notification(n) for n in notifications],
        meta=pagination,
    )


@notifications_bp.route('/send-all', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_body(SendToAllSchema)
def send_to_all():
    data = g.body
    notification = notification_service.send_to_all_members(
        data.title, data.message, data.type, data.priority, g.current_user.id
    )
    return success_response(
        'Notification sent to all members',
        {'notification': serialize_notification(notification)},
        201,
    )


@notifications_bp.route('/send-members', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_body(SendToMembersSchema)
def send_to_members():
    data = g.body
    notification = notification_service.send_to_members(
        data.targetMembers, data.title, data.message, data.type, data.priority, g.current_user.id
    )
    return success_response(
        'Notification sent to selected members',
        {'notification': serialize_notification(notification)},
        201,
    )


@notifications_bp.route('/<id>', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(id='notification')
def get_notification(id):
    notification = notification_service.get_notification_by_id(id)
    if not g.current_user.has_role(UserRole.ADMIN):
        notification_service.ensure_visible(notification, _caller_member())
    return success_response(
        'Notification retrieved successfully',
        {'notification': serialize_notification(notification)},
    )


@notifications_bp.route('/<id>/read', methods=['PATCH'])
@token_required
@roles_required(UserRole.MEMBER)
@validate_object_ids(id='notification')
def mark_read(id):
    notification = notification_service.mark_as_read(id, _caller_member())
    return success_response(
        'Notification marked as read',
        {'notification': serialize_notification(notification)},
    )


@notifications_bp.route('/<id>', methods=['DELETE'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='notification')
def delete_notification(id):
    notification_service.delete_notification(id)
    return success_response('Notification deleted successfully')
