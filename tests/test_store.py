import pytest

from opsmonitor.store import NotFoundError, Page, Store, StoreError, like, matches, paginate


@pytest.fixture
def store():
    with Store() as s:
        yield s


def test_create_and_find_preserve_order(store):
    store.create("rules", {"rule_id": "a", "tenant_id": "t1"})
    store.create("rules", {"rule_id": "b", "tenant_id": "t2"})
    store.create("rules", {"rule_id": "c", "tenant_id": "t1"})
    found = store.find("rules", {"tenant_id": "t1"})
    assert [r["rule_id"] for r in found] == ["a", "c"]


def test_create_returns_copy(store):
    record = {"id": "x", "tags": ["a"]}
    stored = store.create("t", record)
    assert stored == record
    stored["tags"].append("b")
    assert store.first("t", {"id": "x"})["tags"] == ["a"]


def test_tables_are_separate(store):
    store.create("one", {"id": "1"})
    assert store.find("two") == []
    assert store.count("one") == 1


def test_first_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.first("users", {"user_id": "nobody"})


def test_not_found_is_store_error(store):
    with pytest.raises(StoreError):
        store.first("empty")


def test_callable_predicate(store):
    for n in range(5):
        store.create("nums", {"n": n})
    assert store.count("nums", lambda r: r["n"] % 2 == 0) == 3


def test_updates_skips_none(store):
    store.create("t", {"id": "1", "name": "old", "desc": "keep"})
    hit = store.updates("t", {"id": "1"}, {"name": "new", "desc": None})
    assert hit == 1
    assert store.first("t", {"id": "1"}) == {"id": "1", "name": "new", "desc": "keep"}


def test_update_sets_single_column(store):
    store.create("users", {"user_id": "u", "password": "password"})
    store.update("users", {"user_id": "u"}, "password", None)
    assert store.first("users")["password"] is None


def test_update_no_match(store):
    store.create("t", {"id": "1"})
    assert store.updates("t", {"id": "2"}, {"x": 1}) == 0
    assert store.first("t") == {"id": "1"}


def test_delete(store):
    store.create("t", {"id": "1", "tenant_id": "a"})
    store.create("t", {"id": "2", "tenant_id": "a"})
    store.create("t", {"id": "3", "tenant_id": "b"})
    assert store.delete("t", {"tenant_id": "a"}) == 2
    assert [r["id"] for r in store.find("t")] == ["3"]


def test_unserialisable_record_rolls_back(store):
    with pytest.raises(StoreError):
        store.create("t", {"id": object()})
    assert store.count("t") == 0


def test_non_mapping_record_rejected(store):
    with pytest.raises(StoreError):
        store.create("t", ["not", "a", "mapping"])


def test_persists_to_file(tmp_path):
    path = tmp_path / "db.sqlite"
    with Store(path) as s:
        s.create("t", {"id": "1"})
    with Store(path) as s:
        assert s.find("t") == [{"id": "1"}]


def test_closed_store_raises():
    s = Store()
    s.close()
    with pytest.raises(StoreError):
        s.find("t")


def test_matches():
    assert matches({"a": 1, "b": 2}, {"a": 1})
    assert not matches({"a": 1}, {"a": 1, "b": 2})
    assert matches({"a": 1}, {})


def test_like():
    assert like("Disk Usage High", "usage")
    assert not like("cpu", "mem")
    assert like(["ds-1", "ds-2"], "ds-2")
    assert not like(None, "x")
    assert like(None, "")


def test_paginate_pages_cover_everything():
    items = list(range(10))
    pages = [paginate(items, Page(index=i, size=3)) for i in range(1, 5)]
    assert sum(pages, []) == items
    assert pages[1] == [3, 4, 5]


def test_paginate_edges():
    items = list(range(4))
    assert paginate(items, Page(index=0, size=2)) == items[:2]
    assert paginate(items, Page(index=9, size=2)) == []
    assert paginate(items, Page(index=1, size=-1)) == items
    assert paginate(items, Page(index=1, size=0)) == []