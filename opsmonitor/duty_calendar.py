"""Building duty rotations and publishing them to the duty calendar."""

from __future__ import annotations

import logging
import re
from collections import deque
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from .duty import DutyCalendarRepo
from .store import StoreError

DAY = "day"
WEEK = "week"

_MONTH = re.compile(r"(\d{4})-(\d{2})")
_DAY = re.compile(r"(\d{4})-(\d{1,2})-(\d{1,2})")

_log = logging.getLogger(__name__)


def parse_month(month: str) -> tuple[int, int, int]:
    """Parse ``YYYY-MM`` into ``(year, month, 1)``; raises ValueError otherwise."""
    match = _MONTH.fullmatch(month or "")
    if not match:
        raise ValueError(f"invalid month {month!r}, expected YYYY-MM")
    year, mon = int(match.group(1)), int(match.group(2))
    if not 1 <= mon <= 12:
        raise ValueError(f"month out of range in {month!r}")
    return year, mon, 1


def _is_sunday(day_text: str) -> bool:
    """True when ``day_text`` is a real ``Y-M-D`` date falling on a Sunday."""
    match = _DAY.fullmatch(day_text)
    if not match:
        return False
    try:
        day = date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return False
    return day.weekday() == 6


def _shift_days(date_type: str, duty_period: int) -> int:
    if duty_period <= 0:
        raise ValueError("duty period must be positive")
    if date_type == DAY:
        return duty_period
    if date_type == WEEK:
        return 7 * duty_period
    raise ValueError(f"unknown date type {date_type!r}, expected 'day' or 'week'")


def build_schedule(
    tenant_id: str,
    duty_id: str,
    month: str,
    date_type: str,
    duty_period: int,
    users: Iterable[Mapping[str, Any]],
) -> list[dict]:
    """Rotate ``users`` through every day from ``month`` to the end of its year.

    Every month is laid out with days 1 to 31. With ``date_type`` ``"day"`` each
    user takes ``duty_period`` days in turn; with ``"week"`` a user hands over
    after ``duty_period`` Sundays have passed.
    """
    year, first_month, _ = parse_month(month)
    days = _shift_days(date_type, duty_period)
    users = list(users)
    if not users:
        raise ValueError("at least one user is required")

    queue = deque(
        f"{year}-{mon}-{day}" for mon in range(first_month, 13) for day in range(1, 32)
    )
    schedule: list[dict] = []
    sundays = 0
    while queue:
        for user in users:
            for _ in range(days):
                day_text = queue.popleft() if queue else ""
                if day_text:
                    schedule.append(
                        {
                            "tenant_id": tenant_id,
                            "duty_id": duty_id,
                            "time": day_text,
                            "user_id": user.get("user_id", ""),
                            "username": user.get("username", ""),
                        }
                    )
                if date_type == WEEK and _is_sunday(day_text):
                    sundays += 1
                    if sundays == duty_period:
                        sundays = 0
                        break
    return schedule


class DutyCalendarService:
    """Publishes rotations to the duty calendar and reads them back."""

    def __init__(self, calendars: DutyCalendarRepo) -> None:
        self._calendars = calendars

    def create_and_update(
        self,
        tenant_id: str,
        duty_id: str,
        month: str,
        date_type: str,
        duty_period: int,
        users: Iterable[Mapping[str, Any]],
    ) -> list[dict]:
        """Build a rotation and store it, replacing days already on the calendar.

        A failed update is logged and skipped; a failed insert is logged and
        stops publishing. The full rotation is returned either way.
        """
        schedule = build_schedule(tenant_id, duty_id, month, date_type, duty_period, users)
        for entry in schedule:
            if self._calendars.calendar_info(duty_id, entry["time"]) is not None:
                try:
                    self._calendars.update(entry)
                except StoreError as exc:
                    _log.error("值班系统更新失败 %s", exc)
            else:
                try:
                    self._calendars.create(entry)
                except StoreError as exc:
                    _log.error("值班系统创建失败 %s", exc)
                    break
        return schedule

    def update(self, schedule: Mapping[str, Any]) -> int:
        return self._calendars.update(schedule)

    def search(
        self,
        tenant_id: str,
        duty_id: str,
        day: str = "",
        today: Optional[date] = None,
    ) -> list:
        return self._calendars.search(tenant_id, duty_id, day, today)


__all__ = ["DAY", "WEEK", "DutyCalendarService", "build_schedule", "parse_month"]