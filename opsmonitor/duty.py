"""Duty rosters and their day-by-day schedules."""

from __future__ import annotations

import time
import uuid
from datetime import date
from typing import Any, Mapping, Optional

from .store import Store, StoreError

TENANT_TABLE = "tenants"
DUTY_TABLE = "duty_management"
DUTY_SCHEDULE_TABLE = "duty_schedule"
NOTICE_TABLE = "alert_notices"
MEMBER_TABLE = "members"


def _rand_id() -> str:
    return uuid.uuid4().hex[:16]


def day_key(day: date) -> str:
    """Schedule day in the unpadded ``Y-M-D`` form used as the schedule key."""
    return f"{day.year}-{day.month}-{day.day}"


class DutyRepo:
    """Duty rosters per tenant."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def has_quota(self, tenant_id: str) -> bool:
        """True while the tenant has fewer rosters than its duty quota."""
        tenants = self._store.find(TENANT_TABLE, {"id": tenant_id})
        limit = (tenants[0].get("duty_number") or 0) if tenants else 0
        return self._store.count(DUTY_TABLE, {"tenant_id": tenant_id}) < limit

    def list(self, tenant_id: str, today: Optional[date] = None) -> list:
        """A tenant's rosters, each with ``cur_duty_user`` set to today's user name."""
        key = day_key(today or date.today())
        duties = self._store.find(DUTY_TABLE, {"tenant_id": tenant_id})
        for duty in duties:
            schedules = self._store.find(
                DUTY_SCHEDULE_TABLE, {"duty_id": duty.get("id"), "time": key}
            )
            duty["cur_duty_user"] = schedules[0].get("username", "") if schedules else ""
        return duties

    def create(self, duty: Mapping[str, Any], now: Optional[float] = None) -> dict:
        """Store a roster under a fresh ``dt-`` id with its creation time."""
        record = dict(duty)
        record["id"] = "dt-" + _rand_id()
        record["create_at"] = int(time.time() if now is None else now)
        return self._store.create(DUTY_TABLE, record)

    def update(self, duty: Mapping[str, Any]) -> int:
        where = {"tenant_id": duty.get("tenant_id"), "id": duty.get("id")}
        return self._store.updates(DUTY_TABLE, where, duty)

    def delete(self, tenant_id: str, duty_id: str) -> None:
        """Delete a roster and its schedule; refused while a notice refers to it."""
        bound = self._store.count(NOTICE_TABLE, {"tenant_id": tenant_id, "duty_id": duty_id})
        if bound:
            raise StoreError(f"无法删除值班表 {duty_id}, 因为已有通知对象绑定")
        self._store.delete(DUTY_TABLE, {"tenant_id": tenant_id, "id": duty_id})
        self._store.delete(DUTY_SCHEDULE_TABLE, {"tenant_id": tenant_id, "duty_id": duty_id})

    def get(self, tenant_id: str, duty_id: str) -> dict:
        """The roster; raises NotFoundError when missing."""
        return self._store.first(DUTY_TABLE, {"tenant_id": tenant_id, "id": duty_id})


class DutyCalendarRepo:
    """Per-day duty assignments."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def calendar_info(self, duty_id: str, day: str) -> Optional[dict]:
        """The schedule entry of a roster for a day, or None."""
        found = self._store.find(DUTY_SCHEDULE_TABLE, {"duty_id": duty_id, "time": day})
        return found[0] if found else None

    def duty_user(self, duty_id: str, day: str) -> Optional[dict]:
        """The member on duty for a roster and day, or None."""
        schedule = self.calendar_info(duty_id, day)
        user_id = schedule.get("user_id", "") if schedule else ""
        found = self._store.find(MEMBER_TABLE, {"user_id": user_id})
        return found[0] if found else None

    def create(self, schedule: Mapping[str, Any]) -> dict:
        return self._store.create(DUTY_SCHEDULE_TABLE, schedule)

    def update(self, schedule: Mapping[str, Any]) -> int:
        where = {
            "tenant_id": schedule.get("tenant_id"),
            "duty_id": schedule.get("duty_id"),
            "time": schedule.get("time"),
        }
        return self._store.updates(DUTY_SCHEDULE_TABLE, where, schedule)

    def search(
        self,
        tenant_id: str,
        duty_id: str,
        day: str = "",
        today: Optional[date] = None,
    ) -> list:
        """Entries for one day, or for the whole current month when ``day`` is empty."""
        if day:
            return self._store.find(
                DUTY_SCHEDULE_TABLE,
                {"tenant_id": tenant_id, "duty_id": duty_id, "time": day},
            )
        current = today or date.today()
        prefix = f"{current.year}-{current.month}-"
        return self._store.find(
            DUTY_SCHEDULE_TABLE,
            lambda rec: rec.get("tenant_id") == tenant_id
            and rec.get("duty_id") == duty_id
            and str(rec.get("time", "")).startswith(prefix),
        )


__all__ = [
    "DUTY_SCHEDULE_TABLE",
    "DUTY_TABLE",
    "DutyCalendarRepo",
    "DutyRepo",
    "MEMBER_TABLE",
    "NOTICE_TABLE",
    "TENANT_TABLE",
    "day_key",
]