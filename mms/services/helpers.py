"""Identifier, date and pagination helpers shared by the services."""

from __future__ import annotations

import math
import re
import secrets
import time
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable

from sqlalchemy import Select, func, select

from mms.extensions import db
from mms.services.errors import ConflictError

MAX_ID_ATTEMPTS = 10

_BASE36 = '0123456789abcdefghijklmnopqrstuvwxyz'
_DURATION_RE = re.compile(r'^\s*(\d+)\s*([smhdw]?)\s*$')
_DURATION_UNITS = {
    '': 'seconds',
    's': 'seconds',
    'm': 'minutes',
    'h': 'hours',
    'd': 'days',
    'w': 'weeks',
}


def new_object_id() -> str:
    """Return a 24-character hex identifier for primary keys."""
    return uuid.uuid4().hex[:24]


def _to_base36(number: int) -> str:
    if number == 0:
        return '0'
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits))


def generate_id(prefix: str = '') -> str:
    """Prefix + base36 millisecond timestamp + 8 random hex chars, uppercased."""
    timestamp = _to_base36(int(time.time() * 1000))
    random_part = secrets.token_hex(4)
    return f"{prefix}{timestamp}{random_part}".upper()


def generate_member_id() -> str:
    return generate_id('MEM')


def generate_payment_id() -> str:
    return generate_id('PAY')


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_datetime(value: date | datetime) -> datetime:
    """Normalize a date or datetime into an aware UTC datetime."""
    if isinstance(value, datetime):
        return as_utc(value)
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)


def end_of_day(value: date | datetime) -> datetime:
    """Inclusive upper bound for a bare date filter."""
    if isinstance(value, datetime):
        return as_utc(value)
    return to_datetime(value) + timedelta(days=1) - timedelta(microseconds=1)


def add_months(start: datetime, months: int) -> datetime:
    """
    Add calendar months while keeping the day in range
    (e.g., Jan 31 + 1 month => Feb 28/29).
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    # last day of target month
    if m == 12:
        next_month = date(y + 1, 1, 1)
    else:
        next_month = date(y, m + 1, 1)
    last_day = next_month - timedelta(days=1)
    day = min(start.day, last_day.day)
    return start.replace(year=y, month=m, day=day)


def month_start(value: datetime, offset: int = 0) -> datetime:
    """First instant of the month `offset` months away from `value`."""
    first = value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return add_months(first, offset)


def parse_duration(value: str | int) -> timedelta:
    """Parse token lifetimes such as '7d', '12h', '30m' or plain seconds."""
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


def isoformat(value: date | datetime | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    return value.isoformat()


def paginate(stmt: Select, page: int, limit: int, total_key: str) -> tuple[list[Any], dict[str, Any]]:
    """Run a select with offset pagination and build the pagination meta block."""
    total = db.session.scalar(select(func.count()).select_from(stmt.order_by(None).subquery())) or 0
    items = db.session.execute(stmt.offset((page - 1) * limit).limit(limit)).scalars().all()
    return items, pagination_meta(page, limit, total, total_key)


def pagination_meta(page: int, limit: int, total: int, total_key: str) -> dict[str, Any]:
    return {
        'currentPage': page,
        'totalPages': math.ceil(total / limit) if limit else 0,
        total_key: total,
        'hasNext': page * limit < total,
        'hasPrev': page > 1,
    }


def unique_identifier(column, generator: Callable[[], str], label: str) -> str:
    """Generate identifiers until one is unused, giving up after MAX_ID_ATTEMPTS."""
    for _ in range(MAX_ID_ATTEMPTS):
        candidate = generator()
        if db.session.scalar(select(column).where(column == candidate).limit(1)) is None:
            return candidate
    raise ConflictError(f"Could not generate a unique {label}")


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so search terms match literally."""
    return term.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


def ilike_contains(column, term: str):
    """Case-insensitive substring match on a column."""
    return column.ilike(f"%{escape_like(term)}%", escape='\\')


__all__ = [
    'MAX_ID_ATTEMPTS',
    'new_object_id',
    'generate_id',
    'generate_member_id',
    'generate_payment_id',
    'utcnow',
    'as_utc',
    'to_datetime',
    'end_of_day',
    'add_months',
    'month_start',
    'parse_duration',
    'isoformat',
    'paginate',
    'pagination_meta',
    'unique_identifier',
    'escape_like',
    'ilike_contains',
]
