"""Admin reports and dashboard aggregates."""

from datetime import timedelta

import pytest

from mms.extensions import db
from mms.models import AttendanceStatus, MemberStatus, PaymentMethod, PaymentStatus, PaymentType, Zone
from mms.services.event import event_service
from mms.services.helpers import utcnow
from mms.services.payment import payment_service
from mms.services.report import attendance_rate, format_grouped_data


@pytest.fixture
def activity(admin, member, make_member):
    """Two members, two payments and an event with mixed attendance."""
    other = make_member()
    for target, amount, status in ((member, 30, PaymentStatus.COMPLETED), (other, 20, PaymentStatus.PENDING)):
        payment = payment_service.create_payment({
            'memberId': target.id,
            'amount': amount,
            'paymentType': PaymentType.MEMBERSHIP_FEE,
            'paymentMethod': PaymentMethod.CASH,
        }, admin.id)
        payment.status = status
    db.session.commit()

    event = event_service.create_event({
        'title': 'Town Hall',
        'description': 'Quarterly town hall meeting',
        'eventDate': utcnow() + timedelta(days=3),
        'location': 'Auditorium',
    }, admin.id)
    event_service.register_member_for_event(event.id, member.id)
    event_service.register_member_for_event(event.id, other.id)
    event_service.record_attendance(event.id, member.id, AttendanceStatus.ATTENDED)
    return {'members': [member, other], 'event': event}


def test_attendance_rate_rounds_half_up():
    assert attendance_rate(0, 0) == 0
    assert attendance_rate(1, 2) == 50
    assert attendance_rate(2, 3) == 67
    assert attendance_rate(1, 8) == 13


def test_format_grouped_data():
    rows = [(MemberStatus.ACTIVE, 3), (None, 1), ('Custom', 2)]

    assert format_grouped_data(rows) == {'Active': 3, 'Unknown': 1, 'Custom': 2}


def test_dashboard(client, admin_headers, activity):
    overview = client.get('/api/v1/reports/dashboard', headers=admin_headers).get_json()['data']['overview']

    assert overview['members']['total'] == 2
    assert overview['members']['active'] == 2
    assert overview['members']['newThisMonth'] == 2
    assert overview['payments']['thisMonth'] == {'count': 2, 'amount': 50.0}
    assert overview['payments']['lastMonth'] == {'count': 0, 'amount': 0.0}
    assert overview['events']['upcoming'] == 1


def test_member_statistics(client, admin_headers, activity, zone):
    activity['members'][1].status = MemberStatus.SUSPENDED
    db.session.commit()

    stats = client.get('/api/v1/reports/members/statistics', headers=admin_headers).get_json()['data']['stats']

    assert stats['totalMembers'] == 2
    assert stats['membersByStatus'] == {'Active': 1, 'Suspended': 1}
    assert stats['membersByType'] == {'Basic': 2}
    assert stats['membersByZone'] == {zone.name: 2}


def test_detailed_member_report(client, admin_headers, activity):
    body = client.get('/api/v1/reports/members/detailed?status=Active', headers=admin_headers).get_json()

    assert body['data']['total'] == 2
    assert body['data']['filters'] == {'status': 'Active'}


def test_payment_summary(client, admin_headers, activity):
    summary = client.get('/api/v1/reports/payments/summary', headers=admin_headers).get_json()['data']['summary']

    assert summary['totalPayments'] == 2
    assert summary['totalAmount'] == 50.0
    assert summary['completedAmount'] == 30.0
    assert summary['byType'] == {'Membership Fee': {'count': 2, 'amount': 50.0}}
    assert summary['byStatus'] == {'Completed': 1, 'Pending': 1}


def test_payment_summary_date_range(client, admin_headers, activity):
    tomorrow = (utcnow() + timedelta(days=1)).date().isoformat()

    summary = client.get(
        f'/api/v1/reports/payments/summary?dateFrom={tomorrow}', headers=admin_headers
    ).get_json()['data']['summary']

    assert summary['totalPayments'] == 0
    assert summary['byType'] == {}


def test_detailed_payment_report(client, admin_headers, activity):
    data = client.get(
        '/api/v1/reports/payments/detailed?status=Pending', headers=admin_headers
    ).get_json()['data']

    assert len(data['payments']) == 1
    assert data['pagination']['totalPayments'] == 1


def test_event_reports(client, admin_headers, activity):
    stats = client.get('/api/v1/reports/events/statistics', headers=admin_headers).get_json()['data']['stats']
    detailed = client.get('/api/v1/reports/events/detailed', headers=admin_headers).get_json()['data']

    assert stats['totalEvents'] == 1
    assert stats['totalRegistrations'] == 2
    assert stats['overallAttendanceRate'] == 50
    assert detailed['total'] == 1
    assert detailed['events'][0]['statistics'] == {
        'totalRegistrations': 2,
        'attended': 1,
        'noShow': 0,
        'registered': 1,
        'attendanceRate': 50,
    }


def test_zone_report(client, admin_headers, activity, zone):
    db.session.add(Zone(name='Empty Zone'))
    db.session.commit()

    report = client.get('/api/v1/reports/zones', headers=admin_headers).get_json()['data']

    assert report['totalZones'] == 2
    by_name = {z['name']: z for z in report['zones']}
    assert by_name['North Zone']['memberCount'] == 2
    assert by_name['Empty Zone']['memberCount'] == 0


def test_reports_are_admin_only(client, member_headers):
    assert client.get('/api/v1/reports/dashboard', headers=member_headers).status_code == 403
