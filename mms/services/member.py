"""Member profiles and the membership lifecycle."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from flask import current_app
from sqlalchemy import func, or_, select

from mms.extensions import db
from mms.models import (
    Member,
    MemberStatus,
    MembershipType,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    User,
    UserRole,
    Zone,
)
from mms.services.errors import ConflictError, NotFoundError, ValidationError
from mms.services.helpers import (
    add_months,
    as_utc,
    generate_member_id,
    generate_payment_id,
    ilike_contains,
    paginate,
    unique_identifier,
    utcnow,
)
from mms.services.qr import qr_service

SORT_FIELDS = {
    'name': Member.name,
    'memberId': Member.member_id,
    'joinDate': Member.join_date,
    'renewalDate': Member.renewal_date,
    'createdAt': Member.created_at,
}

SEARCH_LIMIT = 20


def _search_clause(term: str):
    return or_(
        ilike_contains(Member.name, term),
        ilike_contains(Member.member_id, term),
        ilike_contains(Member.phone, term),
    )


def _address(value: Any) -> dict | None:
    if value is None:
        return None
    if hasattr(value, 'model_dump'):
        value = value.model_dump()
    return {k: v for k, v in value.items() if v is not None} or None


class MemberService:
    """Member CRUD, renewal accounting and the expiration sweep."""

    def _active_zone(self, zone_id: str) -> Zone:
        zone = db.session.get(Zone, zone_id)
        if zone is None:
            raise NotFoundError('Zone not found')
        if not zone.is_active:
            raise ConflictError('Zone is inactive')
        return zone

    def _get_active(self, id: str) -> Member:
        member = db.session.get(Member, id)
        if member is None or not member.is_active:
            raise NotFoundError('Member not found')
        return member

    def create_member(self, data: dict[str, Any]) -> Member:
        """
        Create a member profile for an existing Member-role user.

        Args:
            data: Validated fields (userId, name, phone, zoneId, membershipType,
                renewalDate and optional address/dateOfBirth)

        Returns:
            The persisted member with its QR code cached
        """
        user = db.session.get(User, data['userId'])
        if user is None:
            raise NotFoundError('User not found')
        if not user.has_role(UserRole.MEMBER):
            raise ValidationError('User must have Member role to create member profile')

        existing = db.session.scalar(select(Member).where(Member.user_id == user.id))
        if existing is not None:
            raise ConflictError('Member profile already exists for this user')

        zone = self._active_zone(data['zoneId'])

        member = Member(
            user=user,
            member_id=unique_identifier(Member.member_id, generate_member_id, 'member ID'),
            name=data['name'],
            phone=data['phone'],
            address=_address(data.get('address')),
            zone=zone,
            membership_type=MembershipType(data['membershipType']),
            date_of_birth=data.get('dateOfBirth'),
            renewal_date=as_utc(data['renewalDate']),
        )
        db.session.add(member)
        db.session.flush()

        member.qr_code = qr_service.generate_member_qr(member.id, member.member_id)
        db.session.commit()
        current_app.logger.info(f"Created member {member.member_id} for user {user.email}")
        return member

    def get_all_members(self, filters: dict[str, Any]) -> tuple[list[Member], dict[str, Any]]:
        stmt = select(Member).where(Member.is_active.is_(True))
        if filters.get('zone'):
            stmt = stmt.where(Member.zone_id == filters['zone'])
        if filters.get('status'):
            stmt = stmt.where(Member.status == MemberStatus(filters['status']))
        if filters.get('membershipType'):
            stmt = stmt.where(Member.membership_type == MembershipType(filters['membershipType']))
        if filters.get('search'):
            stmt = stmt.where(_search_clause(filters['search']))

        column = SORT_FIELDS.get(filters.get('sortBy') or 'createdAt', Member.created_at)
        order = column.asc() if filters.get('sortOrder') == 'asc' else column.desc()
        stmt = stmt.order_by(order, Member.id)

        return paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalMembers')

    def get_member_by_id(self, id: str) -> Member:
        return self._get_active(id)

    def get_member_for_user(self, user_id: str) -> Member:
        member = db.session.scalar(
            select(Member).where(Member.user_id == user_id, Member.is_active.is_(True))
        )
        if member is None:
            raise NotFoundError('Member not found')
        return member

    def update_member(self, id: str, data: dict[str, Any]) -> Member:
        member = self._get_active(id)

        if data.get('zoneId'):
            member.zone = self._active_zone(data['zoneId'])
        if 'name' in data and data['name'] is not None:
            member.name = data['name']
        if 'phone' in data and data['phone'] is not None:
            member.phone = data['phone']
        if 'address' in data:
            member.address = _address(data['address'])
        if data.get('membershipType'):
            member.membership_type = MembershipType(data['membershipType'])
        if data.get('status'):
            member.status = MemberStatus(data['status'])
        if 'dateOfBirth' in data:
            member.date_of_birth = data['dateOfBirth']
        if data.get('renewalDate'):
            member.renewal_date = as_utc(data['renewalDate'])

        db.session.commit()
        return member

    def disable_member(self, id: str) -> Member:
        """Soft delete: the row stays, reads by ID stop finding it."""
        member = db.session.get(Member, id)
        if member is None:
            raise NotFoundError('Member not found')
        if not member.is_active:
            return member

        member.is_active = False
        member.status = MemberStatus.INACTIVE
        db.session.commit()
        current_app.logger.info(f"Disabled member {member.member_id}")
        return member

    def get_member_qr_code(self, id: str) -> dict[str, Any]:
        member = self._get_active(id)
        if not member.qr_code:
            member.qr_code = qr_service.generate_member_qr(member.id, member.member_id)
            db.session.commit()
        return {
            'memberId': member.member_id,
            'memberName': member.name,
            'qrCode': member.qr_code,
        }

    def search_members(self, term: str) -> list[Member]:
        if not term or not term.strip():
            raise ValidationError('Search term is required')
        stmt = (
            select(Member)
            .where(Member.is_active.is_(True), _search_clause(term.strip()))
            .order_by(Member.name.asc())
            .limit(SEARCH_LIMIT)
        )
        return list(db.session.execute(stmt).scalars())

    def renew_membership(self, id: str, data: dict[str, Any], processed_by: str | None) -> dict[str, Any]:
        """
        Extend the renewal date by whole months and record the fee.

        The payment insert and the member update are committed together.

        Args:
            id: Member primary key
            data: renewalPeriod (months), paymentAmount, paymentMethod, transactionId
            processed_by: ID of the admin processing the renewal

        Returns:
            member, payment, previousRenewalDate and newRenewalDate
        """
        member = self._get_active(id)
        period = int(data['renewalPeriod'])
        previous = as_utc(member.renewal_date)
        new_date = add_months(previous, period)

        try:
            payment = Payment(
                payment_id=unique_identifier(Payment.payment_id, generate_payment_id, 'payment ID'),
                member=member,
                amount=data['paymentAmount'],
                payment_type=PaymentType.MEMBERSHIP_FEE,
                payment_method=PaymentMethod(data['paymentMethod']),
                description=f"Membership renewal for {period} months",
                transaction_id=data.get('transactionId'),
                status=PaymentStatus.COMPLETED,
                processed_by=processed_by,
            )
            db.session.add(payment)
            member.renewal_date = new_date
            member.status = MemberStatus.ACTIVE
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            f"Renewed member {member.member_id} for {period} months until {new_date.date().isoformat()}"
        )
        return {
            'member': member,
            'payment': payment,
            'previousRenewalDate': previous,
            'newRenewalDate': new_date,
        }

    def extend_membership(self, id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Override the renewal date without taking a payment."""
        member = self._get_active(id)
        previous = as_utc(member.renewal_date)
        new_date = as_utc(data['newRenewalDate'])

        member.renewal_date = new_date
        if new_date > utcnow() and member.status == MemberStatus.EXPIRED:
            member.status = MemberStatus.ACTIVE
        db.session.commit()

        current_app.logger.info(f"Extended member {member.member_id} until {new_date.date().isoformat()}")
        return {
            'member': member,
            'previousRenewalDate': previous,
            'newRenewalDate': new_date,
            'reason': data.get('reason'),
        }

    def get_expiring_members(self, days: int = 30, filters: dict[str, Any] | None = None):
        filters = filters or {}
        now = utcnow()
        horizon = now + timedelta(days=days)

        stmt = (
            select(Member)
            .where(
                Member.is_active.is_(True),
                Member.renewal_date >= now,
                Member.renewal_date <= horizon,
            )
            .order_by(Member.renewal_date.asc(), Member.id)
        )
        members, pagination = paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalMembers')

        already_expired = db.session.scalar(
            select(func.count(Member.id)).where(
                Member.is_active.is_(True),
                Member.renewal_date < now,
            )
        ) or 0
        summary = {
            'days': days,
            'expiringCount': pagination['totalMembers'],
            'alreadyExpiredCount': already_expired,
        }
        return members, pagination, summary

    def update_expired_members(self) -> dict[str, Any]:
        """Mark active members whose renewal date has passed as Expired, whatever their current status."""
        now = utcnow()
        members = db.session.execute(
            select(Member).where(
                Member.is_active.is_(True),
                Member.status != MemberStatus.EXPIRED,
                Member.renewal_date < now,
            )
        ).scalars().all()

        for member in members:
            member.status = MemberStatus.EXPIRED
        db.session.commit()

        count = len(members)
        current_app.logger.info(f"Expiration sweep marked {count} member(s) as expired")
        return {
            'updatedCount': count,
            'message': f"{count} member(s) marked as expired",
        }


member_service = MemberService()

__all__ = ["MemberService", "member_service", "SORT_FIELDS"]
