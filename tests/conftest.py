"""Shared fixtures for the API test suite."""

from datetime import timedelta

import pytest

from mms import create_app
from mms.config import TestConfig
from mms.extensions import db
from mms.models import Member, MembershipType, User, UserRole, Zone
from mms.services.auth import auth_service
from mms.services.helpers import generate_member_id, utcnow

PASSWORD = 'Password123'


@pytest.fixture
def app(tmp_path):
    """Create and configure a test application instance."""
    app = create_app(TestConfig)
    app.config['UPLOAD_FOLDER'] = str(tmp_path / 'uploads')

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client for the app."""
    return app.test_client()


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def make_user(app):
    """Factory for persisted users."""

    def _make(email, role=UserRole.MEMBER, name='Test User', password=PASSWORD):
        user = User(name=name, email=email, role=role)
        if password is None:
            user.password_hash = '!'
        else:
            user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user('admin@example.com', role=UserRole.ADMIN, name='Admin User')


@pytest.fixture
def admin_headers(admin):
    return auth_headers(auth_service.generate_token(admin.id))


@pytest.fixture
def zone(app):
    zone = Zone(name='North Zone', description='Northern district')
    db.session.add(zone)
    db.session.commit()
    return zone


@pytest.fixture
def make_member(make_user, zone):
    """Factory for members stored directly, without a QR code."""
    counter = {'n': 0}

    def _make(name=None, renewal_date=None, membership_type=MembershipType.BASIC, member_zone=None):
        counter['n'] += 1
        n = counter['n']
        user = make_user(f'member{n}@example.com', name=name or f'Member {n}', password=None)
        member = Member(
            user=user,
            member_id=generate_member_id(),
            name=name or f'Member {n:02d}',
            phone='+1 555 0100',
            zone=member_zone or zone,
            membership_type=membership_type,
            renewal_date=renewal_date or utcnow() + timedelta(days=180),
        )
        db.session.add(member)
        db.session.commit()
        return member

    return _make


@pytest.fixture
def member(make_member):
    return make_member(name='Jane Doe')


@pytest.fixture
def member_headers(member):
    return auth_headers(auth_service.generate_token(member.user_id))


def future(days=30):
    return (utcnow() + timedelta(days=days)).isoformat()
