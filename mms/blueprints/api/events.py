"""Event endpoints: CRUD, registration and attendance."""

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
from mms.schemas.event import (
    AttendanceSchema,
    EventCreateSchema,
    EventFilterSchema,
    EventRegistrationSchema,
    EventUpdateSchema,
)
from mms.security import roles_required, token_required
from mms.services.event import event_service
from mms.services.helpers import isoformat
from mms.services.serializers import serialize_attendee, serialize_event

events_bp = Blueprint('events', __name__)


@events_bp.route('', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_body(EventCreateSchema)
def create_event():
    event = event_service.create_event(body_data(), g.current_user.id)
    return success_response('Event created successfully', {'event': serialize_event(event)}, 201)


@events_bp.route('', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_query(EventFilterSchema)
def list_events():
    events, pagination = event_service.get_all_events(query_data())
    data = [serialize_event(e, include_attendees=False) for e in events]
    return success_response('Events retrieved successfully', data, meta=pagination)


@events_bp.route('/<id>', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(id='event')
def get_event(id):
    event = event_service.get_event_by_id(id)
    # Attendee lists are only shown to admins
    include_attendees = g.current_user.has_role(UserRole.ADMIN)
    return success_response(
        'Event retrieved successfully',
        {'event': serialize_event(event, include_attendees=include_attendees)},
    )


@events_bp.route('/<id>', methods=['PUT'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='event')
@validate_body(EventUpdateSchema)
def update_event(id):
    event = event_service.update_event(id, body_data(exclude_unset=True))
    return success_response('Event updated successfully', {'event': serialize_event(event)})


@events_bp.route('/<id>', methods=['DELETE'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='event')
def delete_event(id):
    event_service.delete_event(id)
    return success_response('Event deleted successfully')


@events_bp.route('/<id>/register', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='event')
@validate_body(EventRegistrationSchema)
def register_member(id):
    event = event_service.register_member_for_event(id, g.body.memberId)
    return success_response('Member registered for event successfully', {'event': serialize_event(event)})


@events_bp.route('/<id>/attendance', methods=['PATCH'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='event')
@validate_body(AttendanceSchema)
def record_attendance(id):
    event = event_service.record_attendance(id, g.body.memberId, g.body.attendanceStatus)
    return success_response('Attendance recorded successfully', {'event': serialize_event(event)})


@events_bp.route('/<id>/attendees', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='event')
def event_attendees(id):
    result = event_service.get_event_attendees(id)
    return success_response('Event attendees retrieved successfully', {
        'eventTitle': result['eventTitle'],
        'eventDate': isoformat(result['eventDate']),
        'attendees': [serialize_attendee(a) for a in result['attendees']],
        'summary': result['summary'],
    })


@events_bp.route('/<id>/qr-code', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(id='event')
def event_qr_code(id):
    result = event_service.generate_event_qr(id)
    return success_response('QR code generated successfully', result)
