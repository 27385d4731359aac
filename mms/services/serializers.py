"""JSON representations of the domain models."""

from __future__ import annotations

from typing import Any, Iterable

from mms.models import Event, EventAttendee, Member, Notification, Payment, User, Zone
from mms.services.helpers import isoformat


def _timestamps(obj) -> dict[str, Any]:
    return {
        'isActive': obj.is_active,
        'createdAt': isoformat(obj.created_at),
        'updatedAt': isoformat(obj.updated_at),
    }


def serialize_user_summary(user: User | None) -> dict | None:
    if user is None:
        return None
    return {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'role': user.role.value,
    }


def serialize_user(user: User) -> dict:
    data = serialize_user_summary(user)
    data.update(_timestamps(user))
    return data


def serialize_zone_summary(zone: Zone | None) -> dict | None:
    if zone is None:
        return None
    return {'id': zone.id, 'name': zone.name, 'description': zone.description}


def serialize_zone(zone: Zone, **extra: Any) -> dict:
    data = {
        'id': zone.id,
        'name': zone.name,
        'description': zone.description,
        **_timestamps(zone),
    }
    data.update(extra)
    return data


def serialize_member_summary(member: Member | None) -> dict | None:
    if member is None:
        return None
    return {'id': member.id, 'name': member.name, 'memberId': member.member_id}


def serialize_member(member: Member, include_qr: bool = True) -> dict:
    data = {
        'id': member.id,
        'memberId': member.member_id,
        'name': member.name,
        'phone': member.phone,
        'address': member.address or None,
        'zone': serialize_zone_summary(member.zone),
        'user': serialize_user_summary(member.user),
        'membershipType': member.membership_type.value,
        'status': member.status.value,
        'dateOfBirth': isoformat(member.date_of_birth),
        'joinDate': isoformat(member.join_date),
        'renewalDate': isoformat(member.renewal_date),
        'profileImage': member.profile_image,
        **_timestamps(member),
    }
    if include_qr:
        data['qrCode'] = member.qr_code
    return data


def serialize_members(members: Iterable[Member]) -> list[dict]:
    return [serialize_member(m, include_qr=False) for m in members]


def serialize_attendee(attendee: EventAttendee) -> dict:
    return {
        'member': serialize_member_summary(attendee.member),
        'registrationDate': isoformat(attendee.registration_date),
        'attendanceStatus': attendee.attendance_status.value,
        'paymentStatus': attendee.payment_status.value,
    }


def serialize_event_summary(event: Event | None) -> dict | None:
    if event is None:
        return None
    return {'id': event.id, 'title': event.title, 'eventDate': isoformat(event.event_date)}


def serialize_event(event: Event, include_attendees: bool = True) -> dict:
    data = {
        'id': event.id,
        'title': event.title,
        'description': event.description,
        'eventDate': isoformat(event.event_date),
        'location': event.location,
        'maxAttendees': event.max_attendees,
        'registrationFee': float(event.registration_fee or 0),
        'status': event.status.value,
        'createdBy': serialize_user_summary(event.creator),
        'attendeeCount': len(event.attendees),
        **_timestamps(event),
    }
    if include_attendees:
        data['attendees'] = [serialize_attendee(a) for a in event.attendees]
    return data


def serialize_payment(payment: Payment) -> dict:
    return {
        'id': payment.id,
        'paymentId': payment.payment_id,
        'member': serialize_member_summary(payment.member),
        'amount': float(payment.amount),
        'paymentType': payment.payment_type.value,
        'paymentMethod': payment.payment_method.value,
        'status': payment.status.value,
        'transactionId': payment.transaction_id,
        'description': payment.description,
        'receiptFile': payment.receipt_file,
        'event': serialize_event_summary(payment.event),
        'paymentDate': isoformat(payment.payment_date),
        'processedBy': serialize_user_summary(payment.processor),
        **_timestamps(payment),
    }


def serialize_notification(notification: Notification) -> dict:
    return {
        'id': notification.id,
        'title': notification.title,
        'message': notification.message,
        'type': notification.type.value,
        'priority': notification.priority.value,
        'targetMembers': [serialize_member_summary(m) for m in notification.target_members],
        'sentBy': serialize_user_summary(notification.sender),
        'sentAt': isoformat(notification.sent_at),
        'status': notification.status.value,
        'isRead': notification.is_read,
        **_timestamps(notification),
    }


__all__ = [
    'serialize_user_summary',
    'serialize_user',
    'serialize_zone_summary',
    'serialize_zone',
    'serialize_member_summary',
    'serialize_member',
    'serialize_members',
    'serialize_attendee',
    'serialize_event_summary',
    'serialize_event',
    'serialize_payment',
    'serialize_notification',
]
