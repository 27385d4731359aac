"""Membership maintenance CLI commands."""

import click
from flask.cli import with_appcontext

from mms.services.member import member_service


@click.group('members')
def member_commands():
    """Membership maintenance commands."""
    pass


@member_commands.command('expire')
@with_appcontext
def expire_members():
    """Mark memberships whose renewal date has passed as Expired.

    Meant to be run from an external scheduler, e.g. daily from cron:

        0 1 * * * flask members expire
    """
    result = member_service.update_expired_members()
    click.echo(click.style(result['message'], fg='green'))


@member_commands.command('expiring')
@click.option('--days', default=30, show_default=True, help='Look-ahead window in days')
@with_appcontext
def list_expiring(days):
    """List members whose renewal date falls within the window."""
    members, pagination, summary = member_service.get_expiring_members(days, {'page': 1, 'limit': 100})
    click.echo(f"{summary['expiringCount']} expiring within {days} days, "
               f"{summary['alreadyExpiredCount']} already past renewal")
    for member in members:
        click.echo(f"  {member.member_id}  {member.name:<30} {member.renewal_date.date().isoformat()}")
    if pagination['hasNext']:
        click.echo('  ...')
