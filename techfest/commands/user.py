"""User management CLI commands."""

import click
from flask.cli import with_appcontext

from techfest.errors import TechFestError
from techfest.extensions import db
from techfest.models import User, UserRole
from techfest.services.auth_session import AuthSessionManager


def _get_user_by_email(email: str) -> User | None:
    return db.session.query(User).filter_by(email=email.strip().lower()).first()


@click.group('user')
def user_commands():
    """User management commands."""
    pass


@user_commands.command('create')
@click.option('--email', required=True, help='User email')
@click.option('--password', required=True, help='User password')
@click.option('--name', required=True, help='Display name')
@click.option('--role', type=click.Choice([r.value for r in UserRole]), default=UserRole.ADMIN.value, show_default=True)
@click.option('--department', default=None, help='Department (coordinators and event heads)')
@with_appcontext
def create_user(email, password, name, role, department):
    """Create a user with the given role."""
    if _get_user_by_email(email):
        click.echo(click.style(f'Error: User with email "{email}" already exists', fg='red'))
        return

    try:
        user = AuthSessionManager.sign_up(email, password, name, role=UserRole(role), system=True)
    except TechFestError as e:
        click.echo(click.style(f'Error: {e.message}', fg='red'))
        return

    if department:
        user.department = department
        db.session.commit()

    click.echo(click.style('User created successfully!', fg='green'))
    click.echo(f'  Email: {user.email}')
    click.echo(f'  Role: {role}')
    if department:
        click.echo(f'  Department: {department}')


@user_commands.command('set-role')
@click.option('--email', required=True, help='User email')
@click.option('--role', type=click.Choice([r.value for r in UserRole]), required=True)
@click.option('--department', default=None, help='Department to assign')
@with_appcontext
def set_role(email, role, department):
    """Change a user's role (and optionally department)."""
    user = _get_user_by_email(email)
    if not user:
        click.echo(click.style(f'Error: No user {email} found', fg='red'))
        return

    user.role = UserRole(role)
    if department is not None:
        user.department = department or None
    db.session.commit()
    click.echo(click.style(f'{user.email} is now {role}.', fg='green'))


@user_commands.command('list')
@click.option('--role', type=click.Choice([r.value for r in UserRole]), default=None)
@with_appcontext
def list_users(role):
    """List users, optionally filtered by role."""
    query = db.session.query(User).order_by(User.email)
    if role:
        query = query.filter(User.role == UserRole(role))
    users = query.all()
    if not users:
        click.echo('No users found.')
        return
    for user in users:
        department = user.department or '-'
        click.echo(f'{user.email:40} {user.role.value:12} {department:16} {user.display_name}')
