"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.memory_store import SAMPLE_DATA_FILE, InMemoryStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import FacilitySlotsError
from ..domain.models import TimeRange, TimeSlot
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="facilityslots",
    help="Compute bookable time slots for facilities",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
DateOption = Annotated[
    Optional[str],
    typer.Option("--date", help="Date (YYYY-MM-DD). Defaults to today."),
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Facility availability engine.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the config file; without an explicit path a missing default file
    falls back to built-in settings.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if config_path.exists():
        return AppConfig.load_from_yaml(config_path)
    return AppConfig()


def _build_service(config: AppConfig) -> AvailabilityService:
    store = InMemoryStore.from_json_file(
        config.data_file or SAMPLE_DATA_FILE,
        timezone=config.timezone,
    )
    return AvailabilityService.from_config(config, store, store, store)


def _parse_date(value: Optional[str], tz: str) -> pendulum.DateTime:
    if value is None:
        return pendulum.today(tz)
    try:
        return pendulum.from_format(value, "YYYY-MM-DD", tz=tz)
    except ValueError:
        console.print(f"[bold red]Error:[/bold red] Invalid date '{value}'. Use YYYY-MM-DD.")
        raise typer.Exit(1)


def _parse_session(value: str, tz: str) -> TimeRange:
    """Parse "START/END" where both sides are ISO 8601 timestamps."""
    start, separator, end = value.partition("/")
    if not separator:
        raise ValueError(f"Session must be START/END, got '{value}'")
    return TimeRange(start=pendulum.parse(start, tz=tz), end=pendulum.parse(end, tz=tz))


def _slots_table(title: str, slots: List[TimeSlot]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Start", style="bold yellow")
    table.add_column("End")
    table.add_column("Status")

    for slot in slots:
        status = "[green]available[/green]" if slot.is_available else "[red]booked[/red]"
        table.add_row(slot.start_time, slot.end_time, status)

    return table


@app.command()
def slots(
    facility_id: Annotated[str, typer.Argument(help="Facility ID")],
    config_file: ConfigOption = None,
    date: DateOption = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Booking duration in minutes")] = None,
    days: Annotated[Optional[int], typer.Option("--days", help="Number of days to show, starting at --date")] = None,
    default_range: Annotated[bool, typer.Option("--range", help="Show the configured default number of days.")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of tables.")] = False,
    only_available: Annotated[bool, typer.Option("--only-available", help="Hide booked slots.")] = False,
):
    """
    Show the time slots of a facility for one day or a range of days.

    Examples:
        facilityslots slots court-1
        facilityslots slots court-1 --date 2026-10-19 --duration 90
        facilityslots slots court-1 --days 7 --json
        facilityslots slots court-1 --range
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config)
        start = _parse_date(date, config.timezone)
        minutes = duration if duration is not None else config.defaults.duration_minutes
        if days is None and default_range:
            days = config.defaults.range_days

        if days is None:
            result = {
                start.to_date_string(): asyncio.run(
                    service.get_available_time_slots(facility_id, start, minutes)
                )
            }
        else:
            result = asyncio.run(
                service.get_available_time_slots_for_range(facility_id, start, days, minutes)
            )

        if only_available:
            result = {
                day: [slot for slot in day_slots if slot.is_available]
                for day, day_slots in result.items()
            }

        if as_json:
            payload = {day: [slot.to_dict() for slot in day_slots] for day, day_slots in result.items()}
            if days is None:
                payload = payload[start.to_date_string()]
            console.print_json(json.dumps(payload))
            return

        for day, day_slots in result.items():
            if not day_slots:
                console.print(f"[yellow]⚠ {day}: no slots (closed or fully in the past).[/yellow]")
                continue
            console.print(_slots_table(f"{facility_id} - {day} ({minutes} min)", day_slots))

    except (FileNotFoundError, ValueError, FacilitySlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def hours(
    facility_id: Annotated[str, typer.Argument(help="Facility ID")],
    config_file: ConfigOption = None,
    date: DateOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a panel.")] = False,
):
    """
    Show the effective business hours of a facility on a day.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config)
        day = _parse_date(date, config.timezone)

        resolution = asyncio.run(service.resolve_business_hours(facility_id, day))

        if as_json:
            console.print_json(json.dumps({
                "facilityId": facility_id,
                "date": day.to_date_string(),
                "weekday": resolution.weekday,
                "hours": resolution.hours.to_dict() if resolution.hours else None,
                "defaulted": resolution.is_defaulted,
            }))
            return

        window = str(resolution.hours) if resolution.hours else "closed"
        note = "\n[yellow]Facility not found, defaults applied.[/yellow]" if resolution.is_defaulted else ""
        console.print(Panel.fit(
            f"[bold]Facility:[/bold] {facility_id}\n"
            f"[bold]Date:[/bold] {day.to_date_string()} ({resolution.weekday})\n"
            f"[bold]Hours:[/bold] {window}{note}",
            title="Business hours"
        ))

    except (FileNotFoundError, ValueError, FacilitySlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def conflicts(
    facility_id: Annotated[str, typer.Argument(help="Facility ID")],
    sessions: Annotated[List[str], typer.Option("--session", "-s", help="Proposed session as START/END (ISO 8601).")],
    config_file: ConfigOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON instead of a table.")] = False,
):
    """
    Check proposed sessions against existing bookings of a facility.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config)
        ranges = [_parse_session(value, config.timezone) for value in sessions]

        report = asyncio.run(service.check_facility_conflicts(facility_id, ranges))

        if as_json:
            console.print_json(json.dumps(report.to_dict()))
            return

        if not (report.conflict_status or report.class_conflicts_status):
            console.print("[green]✓ No conflicting bookings.[/green]")
            return

        table = Table(title=f"Conflicts on {facility_id}", show_header=True, header_style="bold cyan")
        table.add_column("Booking", style="bold yellow")
        table.add_column("Type")
        table.add_column("Time")
        table.add_column("Customer / Session", style="dim")

        for booking in report.conflicts + report.class_conflicts:
            table.add_row(
                booking.id,
                booking.booking_type.value,
                str(booking.time_range),
                booking.customer_name or booking.class_session_id or "",
            )
        console.print(table)

    except (FileNotFoundError, ValueError, FacilitySlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def class_slots(
    class_id: Annotated[str, typer.Argument(help="Class ID")],
    config_file: ConfigOption = None,
    date: DateOption = None,
):
    """
    Show the sessions of a class on a day and whether they have free places.
    """
    try:
        config = _load_config(config_file)
        service = _build_service(config)
        day = _parse_date(date, config.timezone)

        result = asyncio.run(service.get_class_time_slots(class_id, day))

        if not result:
            console.print(f"[yellow]⚠ No sessions for {class_id} on {day.to_date_string()}.[/yellow]")
            return
        console.print(_slots_table(f"{class_id} - {day.to_date_string()}", result))

    except (FileNotFoundError, ValueError, FacilitySlotsError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]facilityslots[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
