"""Aggregated statistics and detailed reports for the admin dashboard."""

from __future__ import annotations

import math
from datetime import timedelta
from typing import Any, Iterable

from sqlalchemy import func, select

from mms.extensions import db
from mms.models import (
    AttendanceStatus,
    Event,
    EventAttendee,
    EventStatus,
    Member,
    MemberStatus,
    MembershipType,
    Notification,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    Zone,
)
from mms.services.helpers import end_of_day, month_start, paginate, to_datetime, utcnow


def format_grouped_data(rows: Iterable[tuple[Any, int]]) -> dict[str, int]:
    """Turn (key, count) rows into a mapping; missing keys become 'Unknown'."""
    result: dict[str, int] = {}
    for key, count in rows:
        if key is None:
            label = 'Unknown'
        else:
            label = key.value if hasattr(key, 'value') else str(key)
        result[label] = result.get(label, 0) + count
    return result


def attendance_rate(attended: int, total: int) -> int:
    """Percentage of registrations that attended, rounded half up."""
    if total <= 0:
        return 0
    return int(math.floor(attended / total * 100 + 0.5))


def _count(model, *criteria) -> int:
    return db.session.scalar(select(func.count(model.id)).where(*criteria)) or 0


def _payment_totals(*criteria) -> dict[str, Any]:
    count, amount = db.session.execute(
        select(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.is_active.is_(True), *criteria
        )
    ).one()
    return {'count': count, 'amount': round(float(amount or 0), 2)}


def _date_range(column, filters: dict[str, Any]) -> list:
    criteria = []
    if filters.get('dateFrom'):
        criteria.append(column >= to_datetime(filters['dateFrom']))
    if filters.get('dateTo'):
        criteria.append(column <= end_of_day(filters['dateTo']))
    return criteria


class ReportService:
    """Read-only aggregate queries; every figure excludes soft-deleted rows."""

    def get_member_statistics(self) -> dict[str, Any]:
        now = utcnow()
        active = Member.is_active.is_(True)

        by_status = db.session.execute(
            select(Member.status, func.count(Member.id)).where(active).group_by(Member.status)
        ).all()
        by_type = db.session.execute(
            select(Member.membership_type, func.count(Member.id)).where(active).group_by(Member.membership_type)
        ).all()
        by_zone = db.session.execute(
            select(Zone.name, func.count(Member.id))
            .select_from(Member)
            .join(Zone, Member.zone_id == Zone.id)
            .where(active)
            .group_by(Zone.name)
        ).all()

        return {
            'totalMembers': _count(Member, active),
            'recentRegistrations': _count(Member, active, Member.created_at >= now - timedelta(days=30)),
            'expiringMemberships': _count(
                Member,
                active,
                Member.renewal_date >= now,
                Member.renewal_date <= now + timedelta(days=30),
            ),
            'membersByStatus': format_grouped_data(by_status),
            'membersByType': format_grouped_data(by_type),
            'membersByZone': format_grouped_data(by_zone),
        }

    def get_dashboard_overview(self) -> dict[str, Any]:
        now = utcnow()
        this_month = month_start(now)
        next_month = month_start(now, 1)
        last_month = month_start(now, -1)
        week_ago = now - timedelta(days=7)
        active_member = Member.is_active.is_(True)
        active_event = Event.is_active.is_(True)

        return {
            'members': {
                'total': _count(Member, active_member),
                'active': _count(Member, active_member, Member.status == MemberStatus.ACTIVE),
                'newThisMonth': _count(Member, active_member, Member.created_at >= this_month),
                'recentlyJoined': _count(Member, active_member, Member.created_at >= week_ago),
            },
            'payments': {
                'thisMonth': _payment_totals(
                    Payment.payment_date >= this_month, Payment.payment_date < next_month
                ),
                'lastMonth': _payment_totals(
                    Payment.payment_date >= last_month, Payment.payment_date < this_month
                ),
                'recent': _count(Payment, Payment.is_active.is_(True), Payment.payment_date >= week_ago),
            },
            'events': {
                'upcoming': _count(
                    Event, active_event, Event.status == EventStatus.UPCOMING, Event.event_date >= now
                ),
                'thisMonth': _count(
                    Event, active_event, Event.event_date >= this_month, Event.event_date < next_month
                ),
            },
            'notifications': {
                'thisMonth': _count(
                    Notification, Notification.is_active.is_(True), Notification.sent_at >= this_month
                ),
            },
        }

    def get_detailed_member_report(self, filters: dict[str, Any]) -> dict[str, Any]:
        criteria = [Member.is_active.is_(True)]
        if filters.get('zone'):
            criteria.append(Member.zone_id == filters['zone'])
        if filters.get('membershipType'):
            criteria.append(Member.membership_type == MembershipType(filters['membershipType']))
        if filters.get('status'):
            criteria.append(Member.status == MemberStatus(filters['status']))
        criteria.extend(_date_range(Member.created_at, filters))

        members = list(db.session.execute(
            select(Member).where(*criteria).order_by(Member.join_date.desc(), Member.id)
        ).scalars())
        return {'members': members, 'total': len(members)}

    def get_payment_summary(self, filters: dict[str, Any]) -> dict[str, Any]:
        """Totals grouped by type, method and status over an optional date range."""
        criteria = [Payment.is_active.is_(True), *_date_range(Payment.payment_date, filters)]

        def grouped(column):
            rows = db.session.execute(
                select(column, func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
                .where(*criteria)
                .group_by(column)
            ).all()
            return {
                key.value: {'count': count, 'amount': round(float(amount or 0), 2)}
                for key, count, amount in rows
            }

        completed = _payment_totals(*criteria[1:], Payment.status == PaymentStatus.COMPLETED)
        overall = _payment_totals(*criteria[1:])
        return {
            'totalPayments': overall['count'],
            'totalAmount': overall['amount'],
            'completedPayments': completed['count'],
            'completedAmount': completed['amount'],
            'byType': grouped(Payment.payment_type),
            'byMethod': grouped(Payment.payment_method),
            'byStatus': {k: v['count'] for k, v in grouped(Payment.status).items()},
        }

    def get_detailed_payment_report(self, filters: dict[str, Any]) -> tuple[list[Payment], dict[str, Any]]:
        stmt = select(Payment).where(Payment.is_active.is_(True))
        if filters.get('memberId'):
            stmt = stmt.where(Payment.member_id == filters['memberId'])
        if filters.get('paymentType'):
            stmt = stmt.where(Payment.payment_type == PaymentType(filters['paymentType']))
        if filters.get('status'):
            stmt = stmt.where(Payment.status == PaymentStatus(filters['status']))
        if filters.get('paymentMethod'):
            stmt = stmt.where(Payment.payment_method == PaymentMethod(filters['paymentMethod']))
        for criterion in _date_range(Payment.payment_date, filters):
            stmt = stmt.where(criterion)
        stmt = stmt.order_by(Payment.payment_date.desc(), Payment.id)

        return paginate(stmt, filters.get('page', 1), filters.get('limit', 50), 'totalPayments')

    def _event_statistics(self, event: Event) -> dict[str, Any]:
        statuses = [a.attendance_status for a in event.attendees]
        attended = statuses.count(AttendanceStatus.ATTENDED)
        return {
            'totalRegistrations': len(statuses),
            'attended': attended,
            'noShow': statuses.count(AttendanceStatus.NO_SHOW),
            'registered': statuses.count(AttendanceStatus.REGISTERED),
            'attendanceRate': attendance_rate(attended, len(statuses)),
        }

    def get_detailed_event_report(self, filters: dict[str, Any]) -> dict[str, Any]:
        criteria = [Event.is_active.is_(True), *_date_range(Event.event_date, filters)]
        if filters.get('status'):
            criteria.append(Event.status == EventStatus(filters['status']))

        events = list(db.session.execute(
            select(Event).where(*criteria).order_by(Event.event_date.desc(), Event.id)
        ).scalars())
        return {
            'events': [(event, self._event_statistics(event)) for event in events],
            'total': len(events),
        }

    def get_event_statistics(self) -> dict[str, Any]:
        now = utcnow()
        active = Event.is_active.is_(True)
        by_status = db.session.execute(
            select(Event.status, func.count(Event.id)).where(active).group_by(Event.status)
        ).all()
        attendance = db.session.execute(
            select(EventAttendee.attendance_status, func.count())
            .select_from(EventAttendee)
            .join(Event, Event.id == EventAttendee.event_id)
            .where(active)
            .group_by(EventAttendee.attendance_status)
        ).all()
        by_attendance = format_grouped_data(attendance)
        total_registrations = sum(by_attendance.values())
        attended = by_attendance.get(AttendanceStatus.ATTENDED.value, 0)

        return {
            'totalEvents': _count(Event, active),
            'upcomingEvents': _count(Event, active, Event.status == EventStatus.UPCOMING, Event.event_date >= now),
            'eventsByStatus': format_grouped_data(by_status),
            'totalRegistrations': total_registrations,
            'registrationsByAttendance': by_attendance,
            'overallAttendanceRate': attendance_rate(attended, total_registrations),
        }

    def get_zone_report(self) -> dict[str, Any]:
        rows = db.session.execute(
            select(Zone.id, Zone.name, Member.status, func.count(Member.id))
            .outerjoin(Member, (Member.zone_id == Zone.id) & Member.is_active.is_(True))
            .where(Zone.is_active.is_(True))
            .group_by(Zone.id, Zone.name, Member.status)
            .order_by(Zone.name)
        ).all()

        zones: dict[str, dict[str, Any]] = {}
        for zone_id, name, status, count in rows:
            entry = zones.setdefault(zone_id, {
                'id': zone_id,
                'name': name,
                'memberCount': 0,
                'activeMemberCount': 0,
            })
            if status is None:
                continue
            entry['memberCount'] += count
            if status == MemberStatus.ACTIVE:
                entry['activeMemberCount'] += count

        return {'zones': list(zones.values()), 'totalZones': len(zones)}


report_service = ReportService()

__all__ = ["ReportService", "report_service", "format_grouped_data", "attendance_rate"]
