"""Admin reporting endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from mms.blueprints.api.validation import query_data, validate_query
from mms.models import UserRole
from mms.responses import success_response
from mms.schemas.report import DateRangeQuery, EventReportSchema, MemberReportSchema, PaymentReportSchema
from mms.security import roles_required, token_required
from mms.services.report import report_service
from mms.services.serializers import serialize_event, serialize_members, serialize_payment

reports_bp = Blueprint('reports', __name__)


def _echo_filters() -> dict:
    return request.args.to_dict()


@reports_bp.route('/dashboard', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
def dashboard():
    overview = report_service.get_dashboard_overview()
    return success_response('Dashboard overview retrieved successfully', {'overview': overview})


@reports_bp.route('/members/statistics', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
def member_statistics():
    stats = report_service.get_member_statistics()
    return success_response('Member statistics retrieved successfully', {'stats': stats})


@reports_bp.route('/members/detailed', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(MemberReportSchema)
def detailed_members():
    result = report_service.get_detailed_member_report(query_data())
    return success_response('Detailed member report retrieved successfully', {
        'members': serialize_members(result['members']),
        'total': result['total'],
        'filters': _echo_filters(),
    })


@reports_bp.route('/payments/summary', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(DateRangeQuery)
def payment_summary():
    summary = report_service.get_payment_summary(query_data())
    return success_response('Payment summary retrieved successfully', {
        'summary': summary,
        'filters': _echo_filters(),
    })


@reports_bp.route('/payments/detailed', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(PaymentReportSchema)
def detailed_payments():
    payments, pagination = report_service.get_detailed_payment_report(query_data())
    return success_response('Detailed payment report retrieved successfully', {
        'payments': [serialize_payment(p) for p in payments],
        'pagination': pagination,
        'filters': _echo_filters(),
    })


@reports_bp.route('/events/statistics', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
def event_statistics():
    stats = report_service.get_event_statistics()
    return success_response('Event statistics retrieved successfully', {'stats': stats})


@reports_bp.route('/events/detailed', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
@validate_query(EventReportSchema)
def detailed_events():
    result = report_service.get_detailed_event_report(query_data())
    events = []
    for event, statistics in result['events']:
        data = serialize_event(event)
        data['statistics'] = statistics
        events.append(data)
    return success_response('Detailed event report retrieved successfully', {
        'events': events,
        'total': result['total'],
        'filters': _echo_filters(),
    })


@reports_bp.route('/zones', methods=['GET'])
@token_required
@roles_required(UserRole.ADMIN)
def zone_report():
    report = report_service.get_zone_report()
    return success_response('Zone report retrieved successfully', report)
