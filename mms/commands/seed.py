"""Data seeding CLI commands."""

import random
from datetime import timedelta

import click
from flask.cli import with_appcontext
from sqlalchemy import func

from mms.extensions import db
from mms.models import (
    AttendanceStatus,
    MembershipType,
    PaymentMethod,
    PaymentType,
    User,
    UserRole,
    Zone,
)
from mms.services.event import event_service
from mms.services.member import member_service
from mms.services.notification import notification_service
from mms.services.payment import payment_service
from mms.services.helpers import utcnow

DEMO_PASSWORD = 'Demo1234'
ZONE_NAMES = ['North', 'South', 'East', 'West']
FIRST_NAMES = ['Amal', 'Nimal', 'Kasun', 'Dilani', 'Sahan', 'Ruwani', 'Tharaka', 'Ishara', 'Malith', 'Nadee']
LAST_NAMES = ['Perera', 'Silva', 'Fernando', 'Jayasinghe', 'Bandara', 'Wickrama']


@click.group('seed')
def seed_commands():
    """Data seeding commands."""
    pass


def _get_or_create_admin(email: str) -> User:
    admin = db.session.query(User).filter_by(email=email).first()
    if admin:
        return admin
    admin = User(name='Demo Admin', email=email, role=UserRole.ADMIN)
    admin.set_password(DEMO_PASSWORD)
    db.session.add(admin)
    db.session.commit()
    return admin


@seed_commands.command('demo')
@click.option('--members', default=20, help='Number of members to create (default: 20)')
@click.option('--events', default=3, help='Number of events to create (default: 3)')
@click.option('--admin-email', default='admin@example.com', help='Admin account to create or reuse')
@with_appcontext
def seed_demo(members, events, admin_email):
    """Seed demo data.

    Creates:
    - An admin account (password Demo1234)
    - Four zones
    - Member users with profiles and a membership payment each
    - Upcoming events with a few registrations
    - A broadcast welcome notification

    Example:
        flask seed demo --members 40 --events 5
    """
    admin = _get_or_create_admin(admin_email.lower())
    click.echo(f'Seeding demo data as {admin.email}')

    zones = []
    for name in ZONE_NAMES:
        zone = db.session.query(Zone).filter(func.lower(Zone.name) == name.lower()).first()
        if zone is None:
            zone = Zone(name=name, description=f'{name} district members')
            db.session.add(zone)
        zones.append(zone)
    db.session.commit()
    click.echo(f'Zones: {", ".join(z.name for z in zones)}')

    now = utcnow()
    created = []
    for i in range(members):
        name = f'{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}'
        email = f'member{i + 1}@example.com'
        if db.session.query(User).filter_by(email=email).first():
            continue

        user = User(name=name, email=email, role=UserRole.MEMBER)
        user.set_password(DEMO_PASSWORD)
        db.session.add(user)
        db.session.commit()

        member = member_service.create_member({
            'userId': user.id,
            'name': name,
            'phone': f'+94 77 {random.randint(100, 999)} {random.randint(1000, 9999)}',
            'zoneId': random.choice(zones).id,
            'membershipType': random.choice(list(MembershipType)),
            'renewalDate': now + timedelta(days=random.randint(5, 365)),
        })
        payment_service.create_payment({
            'memberId': member.id,
            'amount': random.choice([25, 50, 100]),
            'paymentType': PaymentType.MEMBERSHIP_FEE,
            'paymentMethod': random.choice(list(PaymentMethod)),
            'description': 'Annual membership fee',
        }, admin.id)
        created.append(member)
    click.echo(f'Members created: {len(created)}')

    for i in range(events):
        event = event_service.create_event({
            'title': f'Community Meetup #{i + 1}',
            'description': 'Monthly gathering for members and their families.',
            'eventDate': now + timedelta(days=14 * (i + 1)),
            'location': random.choice(zones).name + ' Community Hall',
            'maxAttendees': 50,
            'registrationFee': 0,
        }, admin.id)
        for member in random.sample(created, k=min(5, len(created))):
            event_service.register_member_for_event(event.id, member.id)
        if event.attendees:
            event_service.record_attendance(event.id, event.attendees[0].member_id, AttendanceStatus.ATTENDED)
    click.echo(f'Events created: {events}')

    notification_service.send_to_all_members(
        'Welcome to the membership portal',
        'Your membership details and upcoming events are now available online.',
        sent_by=admin.id,
    )
    click.echo(click.style('Demo data seeded successfully!', fg='green'))
