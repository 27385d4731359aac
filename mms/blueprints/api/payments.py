"""Payment endpoints and receipt uploads."""

from __future__ import annotations

from flask import Blueprint, g, request

from mms.blueprints.api.members import ensure_own_member
from mms.blueprints.api.validation import (
    body_data,
    query_data,
    validate_body,
    validate_object_ids,
    validate_query,
)
from mms.models import UserRole
from mms.responses import success_response
from mms.schemas.payment import PaymentCreateSchema, PaymentFilterSchema, PaymentUpdateSchema
from mms.security import roles_required, token_required
from mms.services.payment import payment_service
from mms.services.serializers import serialize_payment
from mms.services.uploads import upload_service

payments_bp = Blueprint('payments', __name__)


@payments_bp.route('', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_body(PaymentCreateSchema)
def create_payment():
    payment = payment_service.create_payment(body_data(), g.current_user.id)
    return success_response('Payment created successfully', {'payment': serialize_payment(payment)}, 201)


@payments_bp.route('', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(PaymentFilterSchema)
def list_payments():
    payments, pagination = payment_service.get_all_payments(query_data())
    return success_response(
        'Payments retrieved successfully',
        [serialize_payment(p) for p in payments],
        meta=pagination,
    )


@payments_bp.route('/member/<member_id>', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(member_id='member')
def member_payments(member_id):
    ensure_own_member(member_id)
    payments = payment_service.get_payments_by_member(member_id)
    return success_response(
        'Member payments retrieved successfully',
        {'payments': [serialize_payment(p) for p in payments]},
    )


@payments_bp.route('/event/<event_id>', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(event_id='event')
def event_payments(event_id):
    result = payment_service.get_event_payments(event_id)
    return success_response('Event payments retrieved successfully', {
        'eventTitle': result['eventTitle'],
        'payments': [serialize_payment(p) for p in result['payments']],
        'summary': result['summary'],
    })


@payments_bp.route('/<id>', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(id='payment')
def get_payment(id):
    payment = payment_service.get_payment_by_id(id)
    ensure_own_member(payment.member_id)
    return success_response('Payment retrieved successfully', {'payment': serialize_payment(payment)})


@payments_bp.route('/<id>', methods=['PUT'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='payment')
@validate_body(PaymentUpdateSchema)
def update_payment(id):
    payment = payment_service.update_payment(id, body_data(exclude_unset=True))
    return success_response('Payment updated successfully', {'payment': serialize_payment(payment)})


@payments_bp.route('/<id>/receipt', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='payment')
def upload_receipt(id):
    payment_service.get_payment_by_id(id)
    receipt_url = upload_service.store_receipt(request.files.get('receipt'))
    payment = payment_service.upload_receipt(id, receipt_url)
    return success_response('Receipt uploaded successfully', {'payment': serialize_payment(payment)})
