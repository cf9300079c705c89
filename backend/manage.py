"""Management commands for the clinic booking backend."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import click

from clinic_booking.main import create_app
from clinic_booking.db.seed import DEMO_DOCTOR_ID, ensure_doctor, seed_demo_data
from clinic_booking.db.session import SessionLocal, create_tables as _create_tables

logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

# Create the Flask application once so commands can share configuration.
app = create_app()


@click.group()
def cli() -> None:
    """Entry point for management commands."""


@cli.command("create-tables")
def create_tables() -> None:
    """Create every table (idempotent)."""
    with app.app_context():
        _create_tables()
    click.echo("Tables created.")


@cli.command("add-doctor")
@click.argument("doctor_id")
@click.argument("name")
@click.option("--speciality", default=None, help="Medical speciality.")
@click.option("--fee", type=float, default=None, help="Consultation fee.")
def add_doctor(
    doctor_id: str, name: str, speciality: Optional[str], fee: Optional[float]
) -> None:
    """Register a doctor so schedules and bookings can reference it."""
    with app.app_context():
        created = ensure_doctor(doctor_id, name, speciality=speciality, fee=fee)
    click.echo(f"Doctor '{doctor_id}' {'created' if created else 'already exists'}.")


@cli.command("seed-demo")
def seed_demo() -> None:
    """Create a demo doctor with a Monday-Friday schedule."""
    with app.app_context():
        seed_demo_data()
    click.echo(f"Demo data ready (doctor id: {DEMO_DOCTOR_ID}).")


@cli.command("slots")
@click.option("--doctor", "doctor_id", default=DEMO_DOCTOR_ID, show_default=True)
@click.option("--date", "on_date", required=True, help="Date as YYYY-MM-DD.")
def slots(doctor_id: str, on_date: str) -> None:
    """Print the available slots of a doctor on a date."""
    from clinic_booking.controllers.dependencies import build_availability_service
    from clinic_booking.core.exceptions import BookingError

    try:
        target = datetime.strptime(on_date, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter("must be YYYY-MM-DD", param_hint="--date")

    with app.app_context():
        db = SessionLocal()
        try:
            available = build_availability_service(db).get_available_slots(
                doctor_id, target
            )
        except BookingError as e:
            raise click.ClickException(e.message)
        finally:
            db.close()

    if not available:
        click.echo("No available slots.")
        return
    for slot in available:
        click.echo(slot)


if __name__ == "__main__":
    cli()
