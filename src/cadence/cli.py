"""cadence CLI - expand recurring events into occurrences."""

import json
import logging
import sys
from datetime import date, datetime, timedelta, timezone

import click

from .adapters.json_store import EventStoreError
from .config import load_config
from .core.events import Occurrence
from .core.schedule import countdown
from .core.wallclock import InvalidTimezone, resolve_zone
from .workflows import (
    event_occurrences,
    get_store,
    happening_now,
    invalid_timezones,
    month_view,
    upcoming,
)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


@click.group()
@click.version_option(package_name="cadence")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """cadence - recurring event occurrences."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _show_occurrences(
    occurrences: list[Occurrence],
    as_json: bool,
    zone_name: str,
    empty_msg: str = "No occurrences.",
    now: datetime | None = None,
) -> None:
    """Shared occurrence display logic."""
    if as_json:
        click.echo(json.dumps([o.to_dict() for o in occurrences], indent=2))
        return

    if not occurrences:
        click.echo(empty_msg)
        return

    zone = resolve_zone(zone_name)
    current_date = None
    for occ in occurrences:
        local_start = occ.start.astimezone(zone)
        if local_start.date() != current_date:
            if current_date is not None:
                click.echo()
            click.echo(f"### {local_start.strftime('%A, %B %d')}")
            current_date = local_start.date()

        local_end = occ.end.astimezone(zone)
        title = occ.title or occ.event_id
        line = f"  {local_start:%H:%M}-{local_end:%H:%M} {title}"
        if now is not None:
            line += f" ({countdown(occ, now).label})"
        click.echo(line)


def _warn_skipped(skipped: list[str]) -> None:
    if skipped:
        click.echo(f"Skipped {len(skipped)} event(s) with invalid timezones: {', '.join(skipped)}", err=True)


@main.command()
@click.argument("event_id")
@click.option("--from", "range_start", type=click.DateTime(formats=["%Y-%m-%d"]), help="First local date")
@click.option("--to", "range_end", type=click.DateTime(formats=["%Y-%m-%d"]), help="Last local date")
@click.option("--max", "max_occurrences", type=int, default=None, help="Occurrence cap")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def expand(event_id, range_start, range_end, max_occurrences, as_json):
    """Expand one event over a date range (default: the next 30 days)."""
    config = load_config()
    start = range_start.date() if range_start else date.today()
    end = range_end.date() if range_end else start + timedelta(days=30)

    try:
        occurrences = event_occurrences(get_store(config), config, event_id, start, end, max_occurrences)
    except (LookupError, EventStoreError, InvalidTimezone) as e:
        _fail(str(e))

    _show_occurrences(occurrences, as_json, occurrences[0].timezone if occurrences else config.display_timezone)


@main.command("upcoming")
@click.option("--days", type=int, default=None, help="How many days ahead")
@click.option("--limit", type=int, default=None, help="Maximum occurrences")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def upcoming_cmd(days, limit, as_json):
    """List upcoming occurrences across all events."""
    config = load_config()
    try:
        result = upcoming(get_store(config), config, days=days, limit=limit)
        _show_occurrences(result.occurrences, as_json, config.display_timezone, "Nothing upcoming.")
    except (EventStoreError, InvalidTimezone) as e:
        _fail(str(e))
    _warn_skipped(result.skipped)


@main.command("now")
@click.option("--limit", type=int, default=None, help="Maximum occurrences")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def now_cmd(limit, as_json):
    """List occurrences happening right now."""
    config = load_config()
    now = datetime.now(timezone.utc)
    try:
        result = happening_now(get_store(config), config, now=now, limit=limit)
        _show_occurrences(result.occurrences, as_json, config.display_timezone, "Nothing happening now.", now)
    except (EventStoreError, InvalidTimezone) as e:
        _fail(str(e))
    _warn_skipped(result.skipped)


@main.command()
@click.argument("year_month", required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def month(year_month, as_json):
    """Show a calendar month (YYYY-MM, default: this month)."""
    config = load_config()
    if year_month:
        try:
            parsed = datetime.strptime(year_month, "%Y-%m")
        except ValueError:
            _fail(f"Expected YYYY-MM, got {year_month!r}")
        year, mon = parsed.year, parsed.month
    else:
        today = date.today()
        year, mon = today.year, today.month

    try:
        by_day = month_view(get_store(config), config, year, mon)
    except (EventStoreError, InvalidTimezone) as e:
        _fail(str(e))

    if as_json:
        click.echo(
            json.dumps(
                {day.isoformat(): [o.to_dict() for o in occs] for day, occs in sorted(by_day.items())},
                indent=2,
            )
        )
        return

    occurrences = [o for day in sorted(by_day) for o in by_day[day]]
    _show_occurrences(occurrences, False, config.display_timezone, "No events this month.")


@main.command()
def check():
    """Report events whose timezone can't be resolved."""
    config = load_config()
    try:
        bad = invalid_timezones(get_store(config))
    except EventStoreError as e:
        _fail(str(e))

    if not bad:
        click.echo("All event timezones resolve.")
        return

    for definition in bad:
        click.echo(f"{definition.id}: {definition.timezone!r}")
    sys.exit(1)
