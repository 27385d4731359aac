"""Member profile endpoints."""

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
from mms.schemas.member import (
    ExpiringMembersSchema,
    ExtendMembershipSchema,
    MemberCreateSchema,
    MemberFilterSchema,
    MemberSearchSchema,
    MemberUpdateSchema,
    RenewMembershipSchema,
)
from mms.security import roles_required, token_required
from mms.services.errors import AuthorizationError, NotFoundError
from mms.services.helpers import isoformat
from mms.services.member import member_service
from mms.services.serializers import serialize_member, serialize_members, serialize_payment

members_bp = Blueprint('members', __name__)


def ensure_own_member(member_id: str) -> None:
    """Members may only look at their own profile."""
    user = g.current_user
    if user.has_role(UserRole.ADMIN):
        return
    if user.member is None or user.member.id != member_id:
        raise AuthorizationError('Access denied. Insufficient permissions.')


@members_bp.route('', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_body(MemberCreateSchema)
def create_member():
    member = member_service.create_member(body_data())
    return success_response('Member created successfully', {'member': serialize_member(member)}, 201)


@members_bp.route('', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(MemberFilterSchema)
def list_members():
    members, pagination = member_service.get_all_members(query_data())
    return success_response('Members retrieved successfully', serialize_members(members), meta=pagination)


@members_bp.route('/search', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(MemberSearchSchema)
def search_members():
    members = member_service.search_members(g.query.search)
    return success_response('Search completed successfully', serialize_members(members))


@members_bp.route('/me', methods=['GET'])
@token_required
@roles_required(UserRole.MEMBER)
def my_profile():
    try:
        member = member_service.get_member_for_user(g.current_user.id)
    except NotFoundError as exc:
        raise NotFoundError('Member profile not found') from exc
    return success_response('Member profile retrieved successfully', {'member': serialize_member(member)})


@members_bp.route('/expiring-soon', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(ExpiringMembersSchema)
def expiring_members():
    filters = query_data()
    members, pagination, summary = member_service.get_expiring_members(filters['days'], filters)
    return success_response(
        'Expiring members retrieved successfully',
        {'members': serialize_members(members), 'summary': summary},
        meta=pagination,
    )


@members_bp.route('/expire', methods=['PATCH'])
@token_required
@roles_required(UserRole.ADMIN)
def expire_members():
    result = member_service.update_expired_members()
    return success_response('Expired memberships updated successfully', result)


@members_bp.route('/<id>', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(id='member')
def get_member(id):
    ensure_own_member(id)
    member = member_service.get_member_by_id(id)
    return success_response('Member retrieved successfully', {'member': serialize_member(member)})


@members_bp.route('/<id>', methods=['PUT'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='member')
@validate_body(MemberUpdateSchema)
def update_member(id):
    member = member_service.update_member(id, body_data(exclude_unset=True))
    return success_response('Member updated successfully', {'member': serialize_member(member)})


@members_bp.route('/<id>/disable', methods=['PATCH'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='member')
def disable_member(id):
    member = member_service.disable_member(id)
    return success_response('Member disabled successfully', {'member': serialize_member(member, include_qr=False)})


@members_bp.route('/<id>/qr-code', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(id='member')
def member_qr_code(id):
    ensure_own_member(id)
    result = member_service.get_member_qr_code(id)
    return success_response('QR code retrieved successfully', result)


@members_bp.route('/<id>/renew', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='member')
@validate_body(RenewMembershipSchema)
def renew_membership(id):
    result = member_service.renew_membership(id, body_data(), g.current_user.id)
    return success_response('Membership renewed successfully', {
        'member': serialize_member(result['member'], include_qr=False),
        'payment': serialize_payment(result['payment']),
        'previousRenewalDate': isoformat(result['previousRenewalDate']),
        'newRenewalDate': isoformat(result['newRenewalDate']),
    })


@members_bp.route('/<id>/extend', methods=['PUT'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='member')
@validate_body(ExtendMembershipSchema)
def extend_membership(id):
    result = member_service.extend_membership(id, body_data())
    return success_response('Membership extended successfully', {
        'member': serialize_member(result['member'], include_qr=False),
        'previousRenewalDate': isoformat(result['previousRenewalDate']),
        'newRenewalDate': isoformat(result['newRenewalDate']),
        'reason': result['reason'],
    })
