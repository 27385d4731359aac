"""Zones: administrative groupings of members."""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import func, or_, select

from mms.extensions import db
from mms.models import Member, MemberStatus, MembershipType, Zone
from mms.services.errors import ConflictError, NotFoundError, ValidationError
from mms.services.helpers import ilike_contains, paginate

SORT_FIELDS = {
    'name': Zone.name,
    'createdAt': Zone.created_at,
}

SEARCH_LIMIT = 20


def _active_member_count():
    """Correlated count of active members for the zone in the outer query."""
    return (
        select(func.count(Member.id))
        .where(Member.zone_id == Zone.id, Member.is_active.is_(True))
        .correlate(Zone)
        .scalar_subquery()
    )


class ZoneService:

    def _get_active(self, id: str) -> Zone:
        zone = db.session.get(Zone, id)
        if zone is None or not zone.is_active:
            raise NotFoundError('Zone not found')
        return zone

    def _name_taken(self, name: str, exclude_id: str | None = None) -> bool:
        stmt = select(Zone.id).where(
            func.lower(Zone.name) == name.strip().lower(),
            Zone.is_active.is_(True),
        )
        if exclude_id:
            stmt = stmt.where(Zone.id != exclude_id)
        return db.session.scalar(stmt.limit(1)) is not None

    def create_zone(self, data: dict[str, Any]) -> Zone:
        name = data['name'].strip()
        if self._name_taken(name):
            raise ConflictError('Zone with this name already exists')

        zone = Zone(name=name, description=data.get('description'))
        db.session.add(zone)
        db.session.commit()
        current_app.logger.info(f"Created zone {zone.name!r}")
        return zone

    def get_all_zones(self, filters: dict[str, Any]) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """List active zones, each paired with its active member count."""
        member_count = _active_member_count()
        stmt = select(Zone).where(Zone.is_active.is_(True))
        if filters.get('search'):
            term = filters['search']
            stmt = stmt.where(or_(ilike_contains(Zone.name, term), ilike_contains(Zone.description, term)))

        column = SORT_FIELDS.get(filters.get('sortBy') or 'name', Zone.name)
        order = column.desc() if filters.get('sortOrder') == 'desc' else column.asc()
        stmt = stmt.order_by(order, Zone.id)

        zones, pagination = paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalZones')
        counts = {}
        if zones:
            rows = db.session.execute(
                select(Zone.id, member_count).where(Zone.id.in_([z.id for z in zones]))
            ).all()
            counts = {zone_id: count for zone_id, count in rows}
        return [{'zone': z, 'memberCount': counts.get(z.id, 0)} for z in zones], pagination

    def get_zone_by_id(self, id: str) -> dict[str, Any]:
        zone = self._get_active(id)
        rows = db.session.execute(
            select(Member.status, Member.membership_type, func.count(Member.id))
            .where(Member.zone_id == zone.id, Member.is_active.is_(True))
            .group_by(Member.status, Member.membership_type)
        ).all()

        member_count = 0
        active_count = 0
        by_type = {t.value: 0 for t in MembershipType}
        for status, membership_type, count in rows:
            member_count += count
            if status == MemberStatus.ACTIVE:
                active_count += count
            by_type[membership_type.value] += count

        return {
            'zone': zone,
            'memberCount': member_count,
            'activeMemberCount': active_count,
            'membersByType': by_type,
        }

    def update_zone(self, id: str, data: dict[str, Any]) -> Zone:
        zone = self._get_active(id)

        name = data.get('name')
        if name and name.strip() != zone.name:
            if self._name_taken(name, exclude_id=zone.id):
                raise ConflictError('Zone with this name already exists')
            zone.name = name.strip()
        if 'description' in data:
            zone.description = data['description']

        db.session.commit()
        return zone

    def delete_zone(self, id: str) -> Zone:
        zone = self._get_active(id)

        active_members = db.session.scalar(
            select(func.count(Member.id)).where(Member.zone_id == zone.id, Member.is_active.is_(True))
        ) or 0
        if active_members > 0:
            raise ConflictError(
                f"Cannot delete zone. It has {active_members} active member(s). "
                "Please reassign or remove members first."
            )

        zone.is_active = False
        db.session.commit()
        current_app.logger.info(f"Deleted zone {zone.name!r}")
        return zone

    def get_zone_members(self, id: str, filters: dict[str, Any]) -> dict[str, Any]:
        zone = self._get_active(id)

        stmt = select(Member).where(Member.zone_id == zone.id, Member.is_active.is_(True))
        if filters.get('status'):
            stmt = stmt.where(Member.status == MemberStatus(filters['status']))
        if filters.get('membershipType'):
            stmt = stmt.where(Member.membership_type == MembershipType(filters['membershipType']))
        stmt = stmt.order_by(Member.name.asc(), Member.id)

        members, pagination = paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalMembers')
        return {'zone': zone, 'members': members, 'pagination': pagination}

    def search_zones(self, term: str | None) -> list[dict[str, Any]]:
        if not term or not term.strip():
            raise ValidationError('Search term is required')
        term = term.strip()
        member_count = _active_member_count()
        rows = db.session.execute(
            select(Zone, member_count)
            .where(
                Zone.is_active.is_(True),
                or_(ilike_contains(Zone.name, term), ilike_contains(Zone.description, term)),
            )
            .order_by(Zone.name.asc())
            .limit(SEARCH_LIMIT)
        ).all()
        return [{'zone': zone, 'memberCount': count} for zone, count in rows]


zone_service = ZoneService()

__all__ = ["ZoneService", "zone_service", "SORT_FIELDS"]
