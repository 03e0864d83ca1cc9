"""CSV export CLI commands."""

from pathlib import Path

import click
from flask.cli import with_appcontext

from techfest.services.export import export_filename, registration_rows, registrations_csv


@click.group('export')
def export_commands():
    """CSV export commands."""
    pass


def ensure_export_dir(output_dir=None):
    """Ensure the export directory exists."""
    export_dir = Path(output_dir) if output_dir else Path('/tmp/exports')
    export_dir.mkdir(parents=True, exist_ok=True)
    return export_dir


@export_commands.command('registrations')
@click.option('--output-dir', help='Custom output directory (default: /tmp/exports)')
@with_appcontext
def export_registrations(output_dir):
    """Export every registration to a dated CSV file.

    Example:
        flask export registrations --output-dir ./exports
    """
    export_dir = ensure_export_dir(output_dir)
    target = export_dir / export_filename()
    target.write_text(registrations_csv(), encoding='utf-8', newline='')

    click.echo(click.style('✓ Export completed successfully!', fg='green'))
    click.echo(f'  Rows: {len(registration_rows())}')
    click.echo(f'  File: {target}')
