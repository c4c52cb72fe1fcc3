import pytest

from opsmonitor.silences import SilenceRepo
from opsmonitor.store import Page, Store


@pytest.fixture
def repo():
    with Store() as s:
        r = SilenceRepo(s)
        r.create({"tenant_id": "t1", "id": "s-a", "status": 0, "comment": "disk maintenance"})
        r.create({"tenant_id": "t1", "id": "s-b", "status": 1, "comment": "network upgrade"})
        r.create({"tenant_id": "t1", "id": "s-c", "status": 1, "comment": "deploy"})
        r.create({"tenant_id": "t2", "id": "s-d", "status": 0, "comment": "other tenant"})
        yield r


def _ids(items):
    return [item["id"] for item in items]


def test_list_all_statuses(repo):
    items, page = repo.list("t1")
    assert _ids(items) == ["s-a", "s-b", "s-c"]
    assert page.total == len(items)


def test_list_by_status(repo):
    assert _ids(repo.list("t1", status=0)[0]) == ["s-a"]
    assert _ids(repo.list("t1", status=1)[0]) == ["s-b", "s-c"]


def test_list_query_and_paging(repo):
    items, _ = repo.list("t1", query="UPGRADE")
    assert _ids(items) == ["s-b"]
    items, page = repo.list("t1", Page(index=2, size=2))
    assert _ids(items) == ["s-c"]
    assert (page.index, page.size, page.total) == (2, 2, 3)


def test_update_is_scoped_to_tenant(repo):
    assert repo.update({"tenant_id": "t2", "id": "s-a", "comment": "x"}) == 0
    assert repo.update({"tenant_id": "t1", "id": "s-a", "comment": "extended"}) == 1
    items, _ = repo.list("t1", query="extended")
    assert _ids(items) == ["s-a"]


def test_delete(repo):
    assert repo.delete("t1", "s-b") == 1
    assert _ids(repo.list("t1")[0]) == ["s-a", "s-c"]
    assert repo.delete("t1", "s-d") == 0