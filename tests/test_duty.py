from datetime import date

import pytest

from opsmonitor.duty import (
    DUTY_SCHEDULE_TABLE,
    MEMBER_TABLE,
    NOTICE_TABLE,
    TENANT_TABLE,
    DutyCalendarRepo,
    DutyRepo,
    day_key,
)
from opsmonitor.store import NotFoundError, Store, StoreError


@pytest.fixture
def store():
    s = Store()
    yield s
    s.close()


def test_day_key_unpadded():
    assert day_key(date(2024, 3, 5)) == "2024-3-5"


def test_quota(store):
    repo = DutyRepo(store)
    store.create(TENANT_TABLE, {"id": "t1", "duty_number": 1})
    assert repo.has_quota("t1") is True
    repo.create({"tenant_id": "t1", "name": "ops"})
    assert repo.has_quota("t1") is False
    assert repo.has_quota("unknown") is False


def test_create_sets_id_and_time(store):
    repo = DutyRepo(store)
    created = repo.create({"tenant_id": "t1", "name": "ops"}, now=1_700_000_000)
    assert created["id"].startswith("dt-")
    assert created["create_at"] == 1_700_000_000
    assert repo.get("t1", created["id"])["name"] == "ops"


def test_get_missing(store):
    with pytest.raises(NotFoundError):
        DutyRepo(store).get("t1", "nope")


def test_list_sets_current_user(store):
    repo = DutyRepo(store)
    duty = repo.create({"tenant_id": "t1", "name": "ops"})
    store.create(DUTY_SCHEDULE_TABLE, {"tenant_id": "t1", "duty_id": duty["id"], "time": "2024-3-5", "user_id": "u1", "username": "alice"})
    assert repo.list("t1", today=date(2024, 3, 5))[0]["cur_duty_user"] == "alice"
    assert repo.list("t1", today=date(2024, 3, 6))[0]["cur_duty_user"] == ""


def test_update(store):
    repo = DutyRepo(store)
    duty = repo.create({"tenant_id": "t1", "name": "ops"})
    repo.update({"tenant_id": "t1", "id": duty["id"], "name": "sre"})
    assert repo.get("t1", duty["id"])["name"] == "sre"


def test_delete_refused_when_notice_bound(store):
    repo = DutyRepo(store)
    duty = repo.create({"tenant_id": "t1"})
    store.create(NOTICE_TABLE, {"tenant_id": "t1", "duty_id": duty["id"]})
    with pytest.raises(StoreError, match=duty["id"]):
        repo.delete("t1", duty["id"])
    assert repo.get("t1", duty["id"])["id"] == duty["id"]


def test_delete_removes_schedule(store):
    repo = DutyRepo(store)
    duty = repo.create({"tenant_id": "t1"})
    store.create(DUTY_SCHEDULE_TABLE, {"tenant_id": "t1", "duty_id": duty["id"], "time": "2024-3-5"})
    repo.delete("t1", duty["id"])
    assert store.count(DUTY_SCHEDULE_TABLE) == 0
    with pytest.raises(NotFoundError):
        repo.get("t1", duty["id"])


def test_calendar_info_and_duty_user(store):
    calendars = DutyCalendarRepo(store)
    calendars.create({"tenant_id": "t1", "duty_id": "dt-1", "time": "2024-3-5", "user_id": "u1", "username": "alice"})
    store.create(MEMBER_TABLE, {"user_id": "u1", "user_name": "alice"})
    assert calendars.calendar_info("dt-1", "2024-3-5")["user_id"] == "u1"
    assert calendars.calendar_info("dt-1", "2024-3-6") is None
    assert calendars.duty_user("dt-1", "2024-3-5")["user_name"] == "alice"
    assert calendars.duty_user("dt-1", "2024-3-6") is None


def test_calendar_update(store):
    calendars = DutyCalendarRepo(store)
    calendars.create({"tenant_id": "t1", "duty_id": "dt-1", "time": "2024-3-5", "user_id": "u1"})
    calendars.update({"tenant_id": "t1", "duty_id": "dt-1", "time": "2024-3-5", "user_id": "u2"})
    assert calendars.calendar_info("dt-1", "2024-3-5")["user_id"] == "u2"


def test_calendar_search(store):
    calendars = DutyCalendarRepo(store)
    for day in ("2024-1-5", "2024-1-20", "2024-10-5", "2024-2-1"):
        calendars.create({"tenant_id": "t1", "duty_id": "dt-1", "time": day})
    month = calendars.search("t1", "dt-1", today=date(2024, 1, 15))
    assert [rec["time"] for rec in month] == ["2024-1-5", "2024-1-20"]
    exact = calendars.search("t1", "dt-1", day="2024-10-5")
    assert [rec["time"] for rec in exact] == ["2024-10-5"]