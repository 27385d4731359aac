"""Zone endpoints."""

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
from mms.schemas.zone import (
    ZoneCreateSchema,
    ZoneFilterSchema,
    ZoneMembersSchema,
    ZoneSearchSchema,
    ZoneUpdateSchema,
)
from mms.security import roles_required, token_required
from mms.services.serializers import serialize_members, serialize_zone, serialize_zone_summary
from mms.services.zone import zone_service

zones_bp = Blueprint('zones', __name__)


def _zone_details(result: dict) -> dict:
    return serialize_zone(
        result['zone'],
        memberCount=result['memberCount'],
        activeMemberCount=result['activeMemberCount'],
        membersByType=result['membersByType'],
    )


@zones_bp.route('', methods=['POST'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_body(ZoneCreateSchema)
def create_zone():
    zone = zone_service.create_zone(body_data())
    return success_response('Zone created successfully', {'zone': serialize_zone(zone)}, 201)


@zones_bp.route('', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_query(ZoneFilterSchema)
def list_zones():
    rows, pagination = zone_service.get_all_zones(query_data())
    data = [serialize_zone(row['zone'], memberCount=row['memberCount']) for row in rows]
    return success_response('Zones retrieved successfully', data, meta=pagination)


@zones_bp.route('/search', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_query(ZoneSearchSchema)
def search_zones():
    rows = zone_service.search_zones(g.query.search)
    data = [serialize_zone(row['zone'], memberCount=row['memberCount']) for row in rows]
    return success_response('Zone search completed successfully', data)


@zones_bp.route('/<id>', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN, UserRole.MEMBER)
@validate_object_ids(id='zone')
def get_zone(id):
    result = zone_service.get_zone_by_id(id)
    return success_response('Zone retrieved successfully', {'zone': _zone_details(result)})


@zones_bp.route('/<id>', methods=['PUT'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='zone')
@validate_body(ZoneUpdateSchema)
def update_zone(id):
    zone = zone_service.update_zone(id, body_data(exclude_unset=True))
    return success_response('Zone updated successfully', {'zone': serialize_zone(zone)})


@zones_bp.route('/<id>', methods=['DELETE'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='zone')
def delete_zone(id):
    zone_service.delete_zone(id)
    return success_response('Zone deleted successfully')


@zones_bp.route('/<id>/members', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='zone')
@validate_query(ZoneMembersSchema)
def zone_members(id):
    result = zone_service.get_zone_members(id, query_data())
    return success_response(
        'Zone members retrieved successfully',
        {'zone': serialize_zone_summary(result['zone']), 'members': serialize_members(result['members'])},
        meta=result['pagination'],
    )


@zones_bp.route('/<id>/statistics', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_object_ids(id='zone')
def zone_statistics(id):
    result = zone_service.get_zone_by_id(id)
    return success_response('Zone statistics retrieved successfully', {'statistics': _zone_details(result)})
