"""Satchel CLI main entry point."""

import logging
import sys
from pathlib import Path

import click
import structlog

from satchel.config import settings
from satchel.domain import CalendarKey, Container, EventItem, NoteItem
from satchel.infrastructure import (
    ArchiveError,
    ArchiveNotFoundError,
    load_container_with_report,
    write_container,
)
from satchel.utils.time_service import TimeService

logger = structlog.get_logger()

KEY_LABELS = {
    CalendarKey.HOME_EVENTS: "Home events",
    CalendarKey.WORK_EVENTS: "Work events",
    CalendarKey.NOTES: "Notes",
}


def configure_logging(level: str, log_format: str) -> None:
    """Configure structlog for CLI output on stderr."""
    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _echo_container(container: Container, time_service: TimeService) -> None:
    for key in CalendarKey:
        label = KEY_LABELS[key]
        items = container.items(key, key.item_type)
        click.echo(f"{label} ({len(items)}):")
        for item in items:
            if isinstance(item, EventItem):
                when = time_service.format_datetime(item.date)
                line = f"  - {item.title} ({when})"
                if item.description:
                    line += f": {item.description}"
            else:
                line = f"  - {item.text}"
            click.echo(line)


def _load_for_update(path: Path, force: bool) -> Container:
    """Load the archive to append to, or an empty container if it is missing.

    Exits if loading dropped anything, since writing back would lose it.
    """
    try:
        container, report = load_container_with_report(path)
    except ArchiveNotFoundError:
        logger.info("starting_empty_container", path=str(path))
        return Container()

    if not report.is_clean and not force:
        click.echo(
            f"Error: {path} has {report.dropped_key_count} unknown key(s) and "
            f"{report.dropped_item_count} unreadable item(s) that saving would discard. "
            "Use --force to save anyway.",
            err=True,
        )
        sys.exit(1)
    if not report.is_clean:
        logger.warning(
            "discarding_dropped_data",
            path=str(path),
            dropped_keys=report.dropped_keys,
            dropped_items=report.dropped_items,
        )
    return container


def _force_option(func):
    return click.option(
        "--force",
        is_flag=True,
        help="Save even if unknown keys or unreadable items would be discarded",
    )(func)


def _path_option(func):
    return click.option(
        "--path",
        "-p",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Archive file (defaults to SATCHEL_ARCHIVE_PATH)",
    )(func)


@click.group()
@click.pass_context
def cli(ctx):
    """Satchel - keyed item container with single-file persistence."""
    ctx.ensure_object(dict)
    configure_logging(settings.log_level, settings.log_format)
    ctx.obj["time_service"] = TimeService(settings.timezone)


@cli.command()
@_path_option
@click.pass_context
def demo(ctx, path: Path | None):
    """Fill a container, save it, and reload it."""
    time_service: TimeService = ctx.obj["time_service"]
    path = path or settings.archive_path

    container: Container[CalendarKey] = Container()
    container.on_change = lambda: logger.debug("container_changed", items=len(container))

    container.add(
        EventItem(date=time_service.now(), title="title1", description="description1"),
        CalendarKey.HOME_EVENTS,
    )
    container.add(
        EventItem(date=time_service.now(), title="title2", description="description2"),
        CalendarKey.WORK_EVENTS,
    )
    container.add(NoteItem(text="text3"), CalendarKey.NOTES)
    _echo_container(container, time_service)

    try:
        write_container(container, path)
        restored, _ = load_container_with_report(path)
    except ArchiveError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"\nRestored from {path}:")
    _echo_container(restored, time_service)


@cli.command()
@_path_option
@click.pass_context
def show(ctx, path: Path | None):
    """Print the contents of an archive."""
    path = path or settings.archive_path

    try:
        container, report = load_container_with_report(path)
    except ArchiveError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _echo_container(container, ctx.obj["time_service"])

    if not report.is_clean:
        click.echo(
            f"\n⚠️  Dropped {report.dropped_key_count} unknown key(s) and "
            f"{report.dropped_item_count} unreadable item(s)."
        )
        for tag in report.dropped_keys:
            click.echo(f"  unknown key: {tag}")
        for tag, count in report.dropped_items.items():
            click.echo(f"  {tag}: {count} item(s) dropped")


@cli.command(name="add-event")
@click.argument(
    "key",
    type=click.Choice([CalendarKey.HOME_EVENTS.value, CalendarKey.WORK_EVENTS.value]),
)
@click.argument("title")
@click.option("--description", "-d", default="", help="Event description")
@click.option("--date", "date_str", help="Event date (ISO-8601, defaults to now)")
@_path_option
@_force_option
@click.pass_context
def add_event(
    ctx,
    key: str,
    title: str,
    description: str,
    date_str: str | None,
    path: Path | None,
    force: bool,
):
    """Add an event under KEY."""
    time_service: TimeService = ctx.obj["time_service"]
    path = path or settings.archive_path

    try:
        date = time_service.parse_datetime(date_str) if date_str else time_service.now()
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date") from e

    try:
        container = _load_for_update(path, force)
        container.add(
            EventItem(date=date, title=title, description=description),
            CalendarKey(key),
        )
        write_container(container, path)
    except ArchiveError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Added event '{title}' to {key} ({container.count(CalendarKey(key))} total)")


@cli.command(name="add-note")
@click.argument("text")
@_path_option
@_force_option
def add_note(text: str, path: Path | None, force: bool):
    """Add a note."""
    path = path or settings.archive_path

    try:
        container = _load_for_update(path, force)
        container.add(NoteItem(text=text), CalendarKey.NOTES)
        write_container(container, path)
    except ArchiveError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Added note ({container.count(CalendarKey.NOTES)} total)")


if __name__ == "__main__":
    cli()
