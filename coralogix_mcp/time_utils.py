"""Time range utilities for DataPrime queries."""

import re
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta
from typing import Dict, Optional


TIME_RANGE_PATTERN = re.compile(r'^(\d+)([hdw])$', re.ASCII)


class TimeRangeError(ValueError):
    """Raised when a time range string cannot be parsed."""
    pass


@dataclass(frozen=True)
class DateRange:
    """Resolved start/end window in ISO-8601 format."""
    start_date: str
    end_date: str

    def to_dict(self) -> Dict[str, str]:
        return {"startDate": self.start_date, "endDate": self.end_date}


def to_iso(dt: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with millisecond precision."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace('+00:00', 'Z')


class TimeRangeResolver:
    """Converts relative time ranges such as "1h", "24h" or "7d" into date windows."""

    @staticmethod
    def resolve(time_range: str, now: Optional[datetime] = None) -> DateRange:
        """
        Resolve a relative time range ending at the current instant.
        
        Args:
            time_range: Amount followed by a unit: h (hours), d (days) or w (weeks)
            now: Reference instant, defaults to the current UTC time
            
        Returns:
            DateRange ending at ``now``
            
        Raises:
            TimeRangeError: If the time range format is invalid or too large
        """
        match = TIME_RANGE_PATTERN.fullmatch(time_range) if isinstance(time_range, str) else None
        if not match:
            raise TimeRangeError('Invalid time range format. Use format like "1h", "24h", "7d"')

        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        unit = match.group(2)
        try:
            amount = int(match.group(1))
            if unit == 'h':
                start = now - timedelta(hours=amount)
            elif unit == 'd':
                start = now - timedelta(days=amount)
            else:
                start = now - timedelta(days=amount * 7)
        except (OverflowError, ValueError) as e:
            raise TimeRangeError("Time range is too large") from e

        return DateRange(start_date=to_iso(start), end_date=to_iso(now))


def resolve_time_range(time_range: str, now: Optional[datetime] = None) -> DateRange:
    """Resolve a relative time range string into a DateRange."""
    return TimeRangeResolver.resolve(time_range, now)
