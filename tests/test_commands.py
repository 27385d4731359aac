"""Flask CLI commands."""

from datetime import timedelta

from mms.extensions import db
from mms.models import Event, Member, MemberStatus, Notification, User, UserRole, Zone
from mms.services.helpers import utcnow


def test_create_admin(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'user', 'create-admin', '--email', 'Boss@Example.com', '--name', 'Boss', '--password', 'Secret123',
    ])

    assert result.exit_code == 0
    assert 'Admin created successfully!' in result.output
    user = db.session.query(User).filter_by(email='boss@example.com').one()
    assert user.role == UserRole.ADMIN
    assert user.check_password('Secret123')


def test_create_admin_twice_fails(app, admin):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        'user', 'create-admin', '--email', 'admin@example.com', '--name', 'Again', '--password', 'Secret123',
    ])

    assert result.exit_code == 1
    assert 'already exists' in result.output


def test_deactivate_user(app, admin):
    result = app.test_cli_runner().invoke(args=['user', 'deactivate', '--email', 'admin@example.com'])

    assert result.exit_code == 0
    db.session.refresh(admin)
    assert admin.is_active is False


def test_expire_command(app, make_member):
    lapsed = make_member(renewal_date=utcnow() - timedelta(days=2))

    result = app.test_cli_runner().invoke(args=['members', 'expire'])

    assert result.exit_code == 0
    assert '1 member(s) marked as expired' in result.output
    db.session.refresh(lapsed)
    assert lapsed.status == MemberStatus.EXPIRED


def test_expiring_command(app, make_member):
    soon = make_member(renewal_date=utcnow() + timedelta(days=5))

    result = app.test_cli_runner().invoke(args=['members', 'expiring', '--days', '10'])

    assert result.exit_code == 0
    assert soon.member_id in result.output


def test_seed_demo(app):
    result = app.test_cli_runner().invoke(args=['seed', 'demo', '--members', '3', '--events', '1'])

    assert result.exit_code == 0, result.output
    assert db.session.query(Zone).count() == 4
    assert db.session.query(Member).count() == 3
    assert db.session.query(Event).count() == 1
    assert db.session.query(Notification).count() == 1
