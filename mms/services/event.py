"""Events, attendee registration and attendance tracking."""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import or_, select

from mms.extensions import db
from mms.models import (
    AttendanceStatus,
    AttendeePaymentStatus,
    Event,
    EventAttendee,
    EventStatus,
    Member,
)
from mms.services.errors import ConflictError, NotFoundError, ValidationError
from mms.services.helpers import as_utc, end_of_day, ilike_contains, paginate, to_datetime
from mms.services.qr import qr_service

SORT_FIELDS = {
    'title': Event.title,
    'eventDate': Event.event_date,
    'createdAt': Event.created_at,
}

_UPDATABLE = {
    'title': 'title',
    'description': 'description',
    'location': 'location',
    'registrationFee': 'registration_fee',
}


class EventService:
    """Stateless event operations; attendees live in the event_attendee table."""

    def _get_active(self, id: str) -> Event:
        event = db.session.get(Event, id)
        if event is None or not event.is_active:
            raise NotFoundError('Event not found')
        return event

    def create_event(self, data: dict[str, Any], created_by: str) -> Event:
        event = Event(
            title=data['title'],
            description=data['description'],
            event_date=as_utc(data['eventDate']),
            location=data['location'],
            max_attendees=data.get('maxAttendees'),
            registration_fee=data.get('registrationFee') or 0,
            created_by=created_by,
        )
        db.session.add(event)
        db.session.commit()
        current_app.logger.info(f"Created event {event.title!r} on {event.event_date.date().isoformat()}")
        return event

    def get_all_events(self, filters: dict[str, Any]) -> tuple[list[Event], dict[str, Any]]:
        stmt = select(Event).where(Event.is_active.is_(True))
        if filters.get('status'):
            stmt = stmt.where(Event.status == EventStatus(filters['status']))
        if filters.get('dateFrom'):
            stmt = stmt.where(Event.event_date >= to_datetime(filters['dateFrom']))
        if filters.get('dateTo'):
            stmt = stmt.where(Event.event_date <= end_of_day(filters['dateTo']))
        if filters.get('search'):
            term = filters['search']
            stmt = stmt.where(or_(
                ilike_contains(Event.title, term),
                ilike_contains(Event.description, term),
                ilike_contains(Event.location, term),
            ))

        column = SORT_FIELDS.get(filters.get('sortBy') or 'eventDate', Event.event_date)
        order = column.desc() if filters.get('sortOrder') == 'desc' else column.asc()
        stmt = stmt.order_by(order, Event.id)

        return paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalEvents')

    def get_event_by_id(self, id: str) -> Event:
        return self._get_active(id)

    def update_event(self, id: str, data: dict[str, Any]) -> Event:
        event = self._get_active(id)

        for key, attr in _UPDATABLE.items():
            if data.get(key) is not None:
                setattr(event, attr, data[key])
        if data.get('eventDate'):
            event.event_date = as_utc(data['eventDate'])
        if data.get('status'):
            event.status = EventStatus(data['status'])
        if data.get('maxAttendees') is not None:
            if data['maxAttendees'] < len(event.attendees):
                raise ValidationError('Maximum attendees cannot be less than current registrations')
            event.max_attendees = data['maxAttendees']

        db.session.commit()
        return event

    def delete_event(self, id: str) -> Event:
        event = db.session.get(Event, id)
        if event is None:
            raise NotFoundError('Event not found')
        event.is_active = False
        db.session.commit()
        current_app.logger.info(f"Deleted event {event.title!r}")
        return event

    def register_member_for_event(self, event_id: str, member_id: str) -> Event:
        """
        Append a member to the attendee list.

        Checks run in order: event exists, member exists, event is Upcoming,
        member not already registered, capacity not reached.
        """
        event = self._get_active(event_id)

        member = db.session.get(Member, member_id)
        if member is None or not member.is_active:
            raise NotFoundError('Member not found')

        if event.status != EventStatus.UPCOMING:
            raise ValidationError('Event is not accepting registrations')

        if event.find_attendee(member.id) is not None:
            raise ConflictError('Member is already registered for this event')

        if event.max_attendees and len(event.attendees) >= event.max_attendees:
            raise ConflictError('Event is at maximum capacity')

        try:
            event.attendees.append(EventAttendee(
                member=member,
                position=len(event.attendees),
                attendance_status=AttendanceStatus.REGISTERED,
                payment_status=(
                    AttendeePaymentStatus.PENDING
                    if (event.registration_fee or 0) > 0
                    else AttendeePaymentStatus.PAID
                ),
            ))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"Registered member {member.member_id} for event {event.title!r}")
        return event

    def record_attendance(self, event_id: str, member_id: str, status: AttendanceStatus | str) -> Event:
        event = self._get_active(event_id)
        attendee = event.find_attendee(member_id)
        if attendee is None:
            raise NotFoundError('Member is not registered for this event')

        attendee.attendance_status = AttendanceStatus(status)
        db.session.commit()
        return event

    def get_event_attendees(self, event_id: str) -> dict[str, Any]:
        event = self._get_active(event_id)
        statuses = [a.attendance_status for a in event.attendees]
        return {
            'eventTitle': event.title,
            'eventDate': event.event_date,
            'attendees': list(event.attendees),
            'summary': {
                'totalRegistered': len(statuses),
                'attended': statuses.count(AttendanceStatus.ATTENDED),
                'noShow': statuses.count(AttendanceStatus.NO_SHOW),
                'pending': statuses.count(AttendanceStatus.REGISTERED),
            },
        }

    def generate_event_qr(self, event_id: str) -> dict[str, Any]:
        event = self._get_active(event_id)
        return {
            'eventId': event.id,
            'title': event.title,
            'qrCode': qr_service.generate_event_qr(event.id, event.title),
        }


event_service = EventService()

__all__ = ["EventService", "event_service", "SORT_FIELDS"]
