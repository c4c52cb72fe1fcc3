import pytest

from opsmonitor.settings import SettingsRepo
from opsmonitor.store import Store


@pytest.fixture
def repo():
    with Store() as s:
        yield SettingsRepo(s)


def test_empty_store_is_not_initialised(repo):
    assert repo.check() is False
    assert repo.get() == {}


def test_create_marks_initialised(repo):
    stored = repo.create({"alarm_config": {"group_wait": 10}})
    assert stored["is_init"] == 1
    assert repo.check() is True
    assert repo.get()["alarm_config"] == {"group_wait": 10}


def test_update_changes_values_and_keeps_marker(repo):
    repo.create({"alarm_config": {"group_wait": 10}, "theme": "dark"})
    assert repo.update({"alarm_config": {"group_wait": 30}, "is_init": 0}) == 1
    current = repo.get()
    assert current["alarm_config"] == {"group_wait": 30}
    assert current["theme"] == "dark"
    assert current["is_init"] == 1
    assert repo.check() is True


def test_update_without_settings_touches_nothing(repo):
    assert repo.update({"theme": "light"}) == 0
    assert repo.get() == {}