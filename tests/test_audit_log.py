import pytest

from opsmonitor.audit_log import AuditLogRepo
from opsmonitor.store import Page, Store

NOW = 1_700_000_000
DAY = 86400


@pytest.fixture
def repo():
    store = Store()
    yield AuditLogRepo(store)
    store.close()


def test_list_filters_tenant_and_orders_newest_first(repo):
    repo.create({"tenant_id": "t1", "username": "a", "created_at": 10})
    repo.create({"tenant_id": "t1", "username": "b", "created_at": 30})
    repo.create({"tenant_id": "t2", "username": "c", "created_at": 20})
    items, page = repo.list("t1", Page(index=1, size=10))
    assert [rec["username"] for rec in items] == ["b", "a"]
    assert page.total == 2
    assert (page.index, page.size) == (1, 10)


def test_list_pagination(repo):
    for stamp in range(1, 6):
        repo.create({"tenant_id": "t1", "created_at": stamp})
    items, page = repo.list("t1", Page(index=2, size=2))
    assert [rec["created_at"] for rec in items] == [3, 2]
    assert page.total == 5


def test_search_scope_limits_days(repo):
    repo.create({"tenant_id": "t1", "username": "recent", "created_at": NOW - DAY})
    repo.create({"tenant_id": "t1", "username": "old", "created_at": NOW - 3 * DAY})
    items, page = repo.search("t1", Page(), scope="2", now=NOW)
    assert [rec["username"] for rec in items] == ["recent"]
    assert page.total == 1


def test_search_non_numeric_scope_counts_as_zero_days(repo):
    repo.create({"tenant_id": "t1", "username": "past", "created_at": NOW - 1})
    repo.create({"tenant_id": "t1", "username": "now", "created_at": NOW})
    items, _ = repo.search("t1", Page(), scope="abc", now=NOW)
    assert [rec["username"] for rec in items] == ["now"]


def test_search_query_matches_columns(repo):
    repo.create({"tenant_id": "t1", "username": "Alice", "ip_address": "10.0.0.1", "audit_type": "login"})
    repo.create({"tenant_id": "t1", "username": "bob", "ip_address": "10.0.0.2", "audit_type": "rule"})
    repo.create({"tenant_id": "t2", "username": "alice", "ip_address": "", "audit_type": ""})
    items, _ = repo.search("t1", Page(), query="alice")
    assert [rec["username"] for rec in items] == ["Alice"]
    items, _ = repo.search("t1", Page(), query="rule")
    assert [rec["username"] for rec in items] == ["bob"]