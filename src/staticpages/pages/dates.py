"""Timestamp bookkeeping shared by every locale of a page."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Callable, Optional

from staticpages.exceptions import InvalidDateError

logger = logging.getLogger(__name__)

DatePredicate = Callable[[datetime, Optional[datetime]], bool]


def parse_date(value: object) -> Optional[datetime]:
    """Normalize ``value`` into an aware :class:`datetime`.

    Accepts datetimes (naive values are read as UTC), dates, POSIX
    timestamps and ISO 8601 strings. ``None`` and empty strings yield
    ``None``; anything else raises :class:`InvalidDateError`.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool):
        raise InvalidDateError(value)
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise InvalidDateError(value) from exc
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidDateError(value) from exc
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise InvalidDateError(value)


def earliest(new: datetime, current: Optional[datetime]) -> bool:
    return current is None or new < current


def latest(new: datetime, current: Optional[datetime]) -> bool:
    return current is None or new > current


def if_unset(new: datetime, current: Optional[datetime]) -> bool:
    return current is None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampTracker:
    """Hold the named timestamps of a page and reconcile new observations."""

    def __init__(self) -> None:
        self._dates: dict[str, datetime] = {}

    def get_date(self, moment: str = "created_at") -> Optional[datetime]:
        return self._dates.get(moment)

    def set_date(self, moment: str, value: object = None) -> Optional[datetime]:
        """Store ``value`` for ``moment`` unconditionally; absent values are ignored."""

        parsed = parse_date(value)
        if parsed is None:
            return None
        self._dates[moment] = parsed
        return parsed

    def set_date_if(
        self, moment: str, value: object, predicate: DatePredicate
    ) -> Optional[datetime]:
        """Store ``value`` for ``moment`` when ``predicate(candidate, current)`` holds."""

        candidate = parse_date(value)
        if candidate is None:
            return None
        if not predicate(candidate, self._dates.get(moment)):
            return None
        logger.debug("Timestamp %s set to %s", moment, candidate.isoformat())
        self._dates[moment] = candidate
        return candidate
