"""Payment records, receipts and per-member / per-event listings."""

from __future__ import annotations

from typing import Any

from flask import current_app
from sqlalchemy import select

from mms.extensions import db
from mms.models import (
    Event,
    Member,
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from mms.services.errors import NotFoundError
from mms.services.helpers import (
    end_of_day,
    generate_payment_id,
    paginate,
    to_datetime,
    unique_identifier,
)
from mms.services.uploads import upload_service

SORT_FIELDS = {
    'paymentDate': Payment.payment_date,
    'amount': Payment.amount,
    'createdAt': Payment.created_at,
}


class PaymentService:
    """Stateless payment operations."""

    def _get_active(self, id: str) -> Payment:
        payment = db.session.get(Payment, id)
        if payment is None or not payment.is_active:
            raise NotFoundError('Payment not found')
        return payment

    def _active_member(self, member_id: str) -> Member:
        member = db.session.get(Member, member_id)
        if member is None or not member.is_active:
            raise NotFoundError('Member not found')
        return member

    def _active_event(self, event_id: str) -> Event:
        event = db.session.get(Event, event_id)
        if event is None or not event.is_active:
            raise NotFoundError('Event not found')
        return event

    def create_payment(self, data: dict[str, Any], processed_by: str | None) -> Payment:
        member = self._active_member(data['memberId'])
        event = self._active_event(data['eventId']) if data.get('eventId') else None

        payment = Payment(
            payment_id=unique_identifier(Payment.payment_id, generate_payment_id, 'payment ID'),
            member=member,
            amount=data['amount'],
            payment_type=PaymentType(data['paymentType']),
            payment_method=PaymentMethod(data['paymentMethod']),
            description=data.get('description'),
            event=event,
            transaction_id=data.get('transactionId'),
            processed_by=processed_by,
        )
        db.session.add(payment)
        db.session.commit()
        current_app.logger.info(f"Recorded payment {payment.payment_id} of {payment.amount} for {member.member_id}")
        return payment

    def get_all_payments(self, filters: dict[str, Any]) -> tuple[list[Payment], dict[str, Any]]:
        stmt = select(Payment).where(Payment.is_active.is_(True))
        if filters.get('memberId'):
            stmt = stmt.where(Payment.member_id == filters['memberId'])
        if filters.get('paymentType'):
            stmt = stmt.where(Payment.payment_type == PaymentType(filters['paymentType']))
        if filters.get('status'):
            stmt = stmt.where(Payment.status == PaymentStatus(filters['status']))
        if filters.get('eventId'):
            stmt = stmt.where(Payment.event_id == filters['eventId'])
        if filters.get('dateFrom'):
            stmt = stmt.where(Payment.payment_date >= to_datetime(filters['dateFrom']))
        if filters.get('dateTo'):
            stmt = stmt.where(Payment.payment_date <= end_of_day(filters['dateTo']))

        column = SORT_FIELDS.get(filters.get('sortBy') or 'paymentDate', Payment.payment_date)
        order = column.asc() if filters.get('sortOrder') == 'asc' else column.desc()
        stmt = stmt.order_by(order, Payment.id)

        return paginate(stmt, filters.get('page', 1), filters.get('limit', 10), 'totalPayments')

    def get_payment_by_id(self, id: str) -> Payment:
        return self._get_active(id)

    def update_payment(self, id: str, data: dict[str, Any]) -> Payment:
        """Only status, transactionId and description can change after creation."""
        payment = self._get_active(id)
        if data.get('status'):
            payment.status = PaymentStatus(data['status'])
        if 'transactionId' in data:
            payment.transaction_id = data['transactionId']
        if 'description' in data:
            payment.description = data['description']
        db.session.commit()
        return payment

    def get_payments_by_member(self, member_id: str) -> list[Payment]:
        member = self._active_member(member_id)
        stmt = (
            select(Payment)
            .where(Payment.member_id == member.id, Payment.is_active.is_(True))
            .order_by(Payment.payment_date.desc())
        )
        return list(db.session.execute(stmt).scalars())

    def get_event_payments(self, event_id: str) -> dict[str, Any]:
        event = self._active_event(event_id)
        payments = list(db.session.execute(
            select(Payment)
            .where(Payment.event_id == event.id, Payment.is_active.is_(True))
            .order_by(Payment.payment_date.desc())
        ).scalars())

        return {
            'eventTitle': event.title,
            'payments': payments,
            'summary': {
                'totalAmount': round(sum(float(p.amount) for p in payments), 2),
                'totalPayments': len(payments),
                'completedPayments': sum(1 for p in payments if p.status == PaymentStatus.COMPLETED),
                'pendingPayments': sum(1 for p in payments if p.status == PaymentStatus.PENDING),
            },
        }

    def upload_receipt(self, id: str, receipt_url: str) -> Payment:
        """Attach a stored receipt, removing any file it replaces."""
        payment = self._get_active(id)
        previous = payment.receipt_file
        payment.receipt_file = receipt_url
        db.session.commit()

        if previous and previous != receipt_url:
            upload_service.delete_receipt(previous)
        return payment


payment_service = PaymentService()

__all__ = ["PaymentService", "payment_service", "SORT_FIELDS"]
