"""Time service for timezone-aware datetime handling using Pendulum."""

from datetime import datetime

import pendulum
from pendulum import DateTime


class TimeService:
    """Handles timezone detection, parsing and formatting of event dates."""

    def __init__(self, timezone: str | None = None):
        """Initialize with optional timezone override.

        Args:
            timezone: Explicit IANA timezone for display
        """
        self.timezone = timezone or self._detect_timezone()

    def _detect_timezone(self) -> str:
        """Detect timezone using cascade: system → UTC."""
        try:
            return pendulum.local_timezone().name
        except Exception:  # noqa: S110
            pass

        return "UTC"

    def now(self) -> DateTime:
        """Get current time in UTC."""
        return pendulum.now("UTC")

    def format_datetime(self, dt: datetime | DateTime, tz: str | None = None) -> str:
        """Format datetime for display in specified or default timezone."""
        if not isinstance(dt, DateTime):
            dt = pendulum.instance(dt)

        dt_local = dt.in_timezone(tz or self.timezone)

        # Format like "Monday, August 4, 2025, 12:42 PM PDT"
        formatted = dt_local.format("dddd, MMMM D, YYYY, h:mm A")
        tz_abbr = dt_local.strftime("%Z")

        return f"{formatted} {tz_abbr}"

    def parse_datetime(self, dt_str: str) -> DateTime:
        """Parse ISO-8601 and other formats Pendulum understands.

        Naive values are read in the service's timezone. A bare date
        means midnight.
        """
        try:
            parsed = pendulum.parse(dt_str, tz=self.timezone)
        except Exception as e:
            raise ValueError(f"Cannot parse datetime: {dt_str}") from e

        if isinstance(parsed, DateTime):
            return parsed
        if isinstance(parsed, pendulum.Date):
            return pendulum.datetime(parsed.year, parsed.month, parsed.day, tz=self.timezone)
        raise ValueError(f"Cannot parse datetime: {dt_str}")
