"""User management CLI commands."""

import click
from flask.cli import with_appcontext

from mms.extensions import db
from mms.models import User, UserRole


@click.group('user')
def user_commands():
    """User management commands."""
    pass


@user_commands.command('create-admin')
@click.option('--email', required=True, help='Admin email')
@click.option('--name', required=True, help='Display name')
@click.option('--password', required=True, help='Admin password')
@with_appcontext
def create_admin(email, name, password):
    """Create an Admin account."""
    email = email.strip().lower()
    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        click.echo(click.style(f'Error: User with email "{email}" already exists', fg='red'))
        raise SystemExit(1)

    user = User(name=name, email=email, role=UserRole.ADMIN)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()

    click.echo(click.style('Admin created successfully!', fg='green'))
    click.echo(f'  Email: {email}')
    click.echo(f'  Name: {name}')


@user_commands.command('set-password')
@click.option('--email', required=True, help='User email')
@click.option('--password', required=True, help='New password')
@with_appcontext
def set_password(email, password):
    """Set or reset a user's password."""
    user = db.session.query(User).filter_by(email=email.strip().lower()).first()
    if not user:
        click.echo(click.style(f'Error: No user {email} found', fg='red'))
        raise SystemExit(1)

    user.set_password(password)
    db.session.commit()
    click.echo(click.style('Password updated.', fg='green'))


@user_commands.command('deactivate')
@click.option('--email', required=True, help='User email')
@with_appcontext
def deactivate(email):
    """Block a user from logging in."""
    user = db.session.query(User).filter_by(email=email.strip().lower()).first()
    if not user:
        click.echo(click.style(f'Error: No user {email} found', fg='red'))
        raise SystemExit(1)

    user.is_active = False
    db.session.commit()
    click.echo(click.style(f'User {user.email} deactivated.', fg='yellow'))
