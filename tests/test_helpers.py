"""Identifier, date and pagination helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from mms.models import Member
from mms.services.errors import ConflictError, ValidationError
from mms.services.helpers import (
    add_months,
    as_utc,
    end_of_day,
    escape_like,
    generate_member_id,
    generate_payment_id,
    month_start,
    pagination_meta,
    parse_duration,
    unique_identifier,
)
from mms.services.qr import qr_service


class TestAddMonths:

    def test_simple(self):
        start = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert add_months(start, 3) == datetime(2024, 4, 15, tzinfo=timezone.utc)

    def test_clamps_to_month_end(self):
        assert add_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)
        assert add_months(datetime(2023, 1, 31), 1) == datetime(2023, 2, 28)
        assert add_months(datetime(2024, 3, 31), 1) == datetime(2024, 4, 30)

    def test_rolls_over_year(self):
        assert add_months(datetime(2024, 11, 30), 3) == datetime(2025, 2, 28)
        assert add_months(datetime(2024, 12, 1), 12) == datetime(2025, 12, 1)

    def test_negative_offsets(self):
        assert add_months(datetime(2024, 3, 31), -1) == datetime(2024, 2, 29)
        assert month_start(datetime(2024, 1, 20, 15, 30), -1) == datetime(2023, 12, 1)


class TestDurations:

    @pytest.mark.parametrize('value, expected', [
        ('7d', timedelta(days=7)),
        ('12h', timedelta(hours=12)),
        ('30m', timedelta(minutes=30)),
        ('45s', timedelta(seconds=45)),
        ('2w', timedelta(weeks=2)),
        ('90', timedelta(seconds=90)),
        (3600, timedelta(hours=1)),
    ])
    def test_parse(self, value, expected):
        assert parse_duration(value) == expected

    def test_invalid(self):
        with pytest.raises(ValueError):
            parse_duration('seven days')


class TestIdentifiers:

    def test_prefixes(self):
        assert generate_member_id().startswith('MEM')
        assert generate_payment_id().startswith('PAY')

    def test_uppercase(self):
        value = generate_member_id()
        assert value == value.upper()

    def test_unique_in_bulk(self):
        ids = {generate_member_id() for _ in range(1000)}
        assert len(ids) == 1000

    def test_unique_identifier_gives_up(self, member):
        with pytest.raises(ConflictError):
            unique_identifier(Member.member_id, lambda: member.member_id, 'member ID')

    def test_unique_identifier_returns_free_value(self, member):
        assert unique_identifier(Member.member_id, lambda: 'MEMFREE', 'member ID') == 'MEMFREE'


def test_pagination_meta():
    assert pagination_meta(1, 10, 0, 'totalThings') == {
        'currentPage': 1,
        'totalPages': 0,
        'totalThings': 0,
        'hasNext': False,
        'hasPrev': False,
    }
    assert pagination_meta(3, 10, 25, 'totalThings')['hasNext'] is False


def test_escape_like():
    assert escape_like('50%_off\\') == '50\\%\\_off\\\\'


def test_dates_are_utc():
    naive = datetime(2024, 5, 1, 8, 0)
    assert as_utc(naive).tzinfo == timezone.utc
    assert end_of_day(naive.date()) == datetime(2024, 5, 1, 23, 59, 59, 999999, tzinfo=timezone.utc)


def test_qr_payload_decoding():
    assert qr_service.decode_qr('{"type": "member", "memberId": "MEM1"}')['memberId'] == 'MEM1'
    with pytest.raises(ValidationError):
        qr_service.decode_qr('not json')
    with pytest.raises(ValidationError):
        qr_service.decode_qr('[1, 2]')
