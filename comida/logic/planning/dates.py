"""Calendar-day keys for menu plans and their Spanish display labels."""
from datetime import date, datetime, timedelta
from typing import List, Mapping, Optional, Tuple, Union

from comida.utilities.constants import DATE_KEY_FORMAT, MONTH_NAMES_ES, WEEKDAY_NAMES_ES


def parse_date_key(key: Union[str, date]) -> date:
    """Parse a YYYY-MM-DD key as a plain calendar date (no clock, no timezone)."""
    if isinstance(key, datetime):
        return key.date()
    if isinstance(key, date):
        return key
    try:
        return datetime.strptime(key.strip(), DATE_KEY_FORMAT).date()
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid date key: {key!r}") from e


def expand_date_range(start: Union[str, date], days: int) -> List[str]:
    """Return `days` consecutive ISO day keys starting at `start`, inclusive.

    Args:
        start: first day, as a date or a YYYY-MM-DD string
        days: number of days, at least 1
    Returns:
        list[str]: ascending, unique keys with no gaps
    """
    if days < 1:
        raise ValueError("days must be at least 1")
    first = parse_date_key(start)
    return [(first + timedelta(days=i)).strftime(DATE_KEY_FORMAT) for i in range(days)]


def format_display_date(key: Union[str, date]) -> str:
    '''
    Long Spanish form of a day key: '2025-09-04' -> 'jueves, 4 de septiembre'.
    '''
    d = parse_date_key(key)
    return f"{WEEKDAY_NAMES_ES[d.weekday()]}, {d.day} de {MONTH_NAMES_ES[d.month - 1]}"


def date_range_bounds(plan: Optional[Mapping[str, object]]) -> Optional[Tuple[str, str]]:
    if not plan:
        return None
    keys = sorted(plan.keys())
    return keys[0], keys[-1]


def format_date_range(start: str, end: str) -> str:
    if start == end:
        return format_display_date(start)
    return f"Del {format_display_date(start)} al {format_display_date(end)}"

