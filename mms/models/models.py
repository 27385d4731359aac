from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Integer,
    JSON,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mms.extensions import db, bcrypt
from mms.services.helpers import new_object_id, utcnow


def _enum(enum_cls: type[Enum], name: str) -> SqlEnum:
    return SqlEnum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda x: [e.value for e in x],
        validate_strings=True,
    )


class TimestampedBase(db.Model):
    """Abstract base providing id/created/updated columns and the soft-delete flag."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        String(24),
        primary_key=True,
        default=new_object_id,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


class UserRole(Enum):
    ADMIN = "Admin"
    MEMBER = "Member"


class MembershipType(Enum):
    BASIC = "Basic"
    PREMIUM = "Premium"
    VIP = "VIP"


class MemberStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    SUSPENDED = "Suspended"
    EXPIRED = "Expired"


class EventStatus(Enum):
    UPCOMING = "Upcoming"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class AttendanceStatus(Enum):
    REGISTERED = "Registered"
    ATTENDED = "Attended"
    NO_SHOW = "No Show"


class AttendeePaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    REFUNDED = "Refunded"


class PaymentType(Enum):
    MEMBERSHIP_FEE = "Membership Fee"
    EVENT_REGISTRATION = "Event Registration"
    LATE_FEE = "Late Fee"
    OTHER = "Other"


class PaymentMethod(Enum):
    CASH = "Cash"
    CREDIT_CARD = "Credit Card"
    DEBIT_CARD = "Debit Card"
    BANK_TRANSFER = "Bank Transfer"
    ONLINE = "Online"
    CHEQUE = "Cheque"


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"


class NotificationType(Enum):
    GENERAL = "General"
    EVENT = "Event"
    PAYMENT = "Payment"
    MEMBERSHIP = "Membership"
    REMINDER = "Reminder"


class NotificationPriority(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class NotificationStatus(Enum):
    DRAFT = "Draft"
    SCHEDULED = "Scheduled"
    SENT = "Sent"
    FAILED = "Failed"


class User(TimestampedBase):
    __tablename__ = "user"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        _enum(UserRole, "user_role"),
        nullable=False,
        default=UserRole.MEMBER,
    )

    member: Mapped[Optional["Member"]] = relationship(back_populates="user", uselist=False)

    def set_password(self, password: str) -> None:
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError:
            return False

    def has_role(self, *roles: UserRole | str) -> bool:
        role_value = self.role.value if isinstance(self.role, UserRole) else str(self.role)
        allowed = {r.value if isinstance(r, UserRole) else str(r) for r in roles}
        return role_value in allowed

    def __repr__(self) -> str:
        return f"<User {self.email}>"


class Zone(TimestampedBase):
    __tablename__ = "zone"

    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    members: Mapped[list["Member"]] = relationship(back_populates="zone")

    def __repr__(self) -> str:
        return f"<Zone {self.name}>"


class Member(TimestampedBase):
    __tablename__ = "member"

    user_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    member_id: Mapped[str] = mapped_column(String(40), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False)
    address: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    zone_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("zone.id"),
        nullable=False,
        index=True,
    )
    membership_type: Mapped[MembershipType] = mapped_column(
        _enum(MembershipType, "membership_type"),
        nullable=False,
        default=MembershipType.BASIC,
    )
    status: Mapped[MemberStatus] = mapped_column(
        _enum(MemberStatus, "member_status"),
        nullable=False,
        default=MemberStatus.ACTIVE,
        index=True,
    )
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    join_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    renewal_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    qr_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    user: Mapped[User] = relationship(back_populates="member")
    zone: Mapped[Zone] = relationship(back_populates="members")
    payments: Mapped[list["Payment"]] = relationship(back_populates="member", foreign_keys="Payment.member_id")
    registrations: Mapped[list["EventAttendee"]] = relationship(back_populates="member")

    def __repr__(self) -> str:
        return f"<Member {self.member_id}>"


class Event(TimestampedBase):
    __tablename__ = "event"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    max_attendees: Mapped[int | None] = mapped_column(Integer, nullable=True)
    registration_fee: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    status: Mapped[EventStatus] = mapped_column(
        _enum(EventStatus, "event_status"),
        nullable=False,
        default=EventStatus.UPCOMING,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("user.id"),
        nullable=False,
    )

    creator: Mapped[User] = relationship(foreign_keys=[created_by])
    attendees: Mapped[list["EventAttendee"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventAttendee.position",
    )

    def find_attendee(self, member_id: str) -> "EventAttendee | None":
        for attendee in self.attendees:
            if attendee.member_id == member_id:
                return attendee
        return None

    def __repr__(self) -> str:
        return f"<Event {self.title}>"


class EventAttendee(db.Model):
    __tablename__ = "event_attendee"
    __table_args__ = (
        UniqueConstraint("event_id", "member_id", name="uq_event_attendee_member"),
    )

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)
    event_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("event.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    member_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("member.id"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    registration_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    attendance_status: Mapped[AttendanceStatus] = mapped_column(
        _enum(AttendanceStatus, "attendance_status"),
        nullable=False,
        default=AttendanceStatus.REGISTERED,
    )
    payment_status: Mapped[AttendeePaymentStatus] = mapped_column(
        _enum(AttendeePaymentStatus, "attendee_payment_status"),
        nullable=False,
        default=AttendeePaymentStatus.PENDING,
    )

    event: Mapped[Event] = relationship(back_populates="attendees")
    member: Mapped[Member] = relationship(back_populates="registrations")


class Payment(TimestampedBase):
    __tablename__ = "payment"

    payment_id: Mapped[str] = mapped_column(String(40), nullable=False, unique=True, index=True)
    member_id: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("member.id"),
        nullable=False,
        index=True,
    )
    amount: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    payment_type: Mapped[PaymentType] = mapped_column(
        _enum(PaymentType, "payment_type"),
        nullable=False,
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        _enum(PaymentMethod, "payment_method"),
        nullable=False,
    )
    status: Mapped[PaymentStatus] = mapped_column(
        _enum(PaymentStatus, "payment_status"),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True,
    )
    transaction_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    receipt_file: Mapped[str | None] = mapped_column(String(500), nullable=True)
    event_id: Mapped[str | None] = mapped_column(
        String(24),
        ForeignKey("event.id"),
        nullable=True,
        index=True,
    )
    payment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    processed_by: Mapped[str | None] = mapped_column(
        String(24),
        ForeignKey("user.id"),
        nullable=True,
    )

    member: Mapped[Member] = relationship(back_populates="payments", foreign_keys=[member_id])
    event: Mapped[Event | None] = relationship(foreign_keys=[event_id])
    processor: Mapped[User | None] = relationship(foreign_keys=[processed_by])

    def __repr__(self) -> str:
        return f"<Payment {self.payment_id}>"


notification_target = Table(
    "notification_target",
    db.metadata,
    Column("notification_id", String(24), ForeignKey("notification.id", ondelete="CASCADE"), primary_key=True),
    Column("member_id", String(24), ForeignKey("member.id", ondelete="CASCADE"), primary_key=True),
)


class Notification(TimestampedBase):
    __tablename__ = "notification"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[NotificationType] = mapped_column(
        _enum(NotificationType, "notification_type"),
        nullable=False,
        default=NotificationType.GENERAL,
    )
    priority: Mapped[NotificationPriority] = mapped_column(
        _enum(NotificationPriority, "notification_priority"),
        nullable=False,
        default=NotificationPriority.MEDIUM,
    )
    sent_by: Mapped[str] = mapped_column(
        String(24),
        ForeignKey("user.id"),
        nullable=False,
    )
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    status: Mapped[NotificationStatus] = mapped_column(
        _enum(NotificationStatus, "notification_status"),
        nullable=False,
        default=NotificationStatus.SENT,
    )
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    sender: Mapped[User] = relationship(foreign_keys=[sent_by])
    target_members: Mapped[list[Member]] = relationship(secondary=notification_target)

    @property
    def is_broadcast(self) -> bool:
        return not self.target_members

    def __repr__(self) -> str:
        return f"<Notification {self.title}>"


__all__ = [
    "TimestampedBase",
    "UserRole",
    "MembershipType",
    "MemberStatus",
    "EventStatus",
    "AttendanceStatus",
    "AttendeePaymentStatus",
    "PaymentType",
    "PaymentMethod",
    "PaymentStatus",
    "NotificationType",
    "NotificationPriority",
    "NotificationStatus",
    "User",
    "Zone",
    "Member",
    "Event",
    "EventAttendee",
    "Payment",
    "Notification",
    "notification_target",
]
