import json

import pytest

from opsmonitor.current_events import (
    filter_current_events,
    list_current_events,
    page_slice,
)
from opsmonitor.store import Page

EVENTS = [
    {
        "rule_name": "cpu high",
        "severity": "P0",
        "datasource_type": "Prometheus",
        "first_trigger_time": 1000,
        "annotations": "host web-1",
        "metric": {"instance": "web-1"},
    },
    {
        "rule_name": "disk full",
        "severity": "P1",
        "datasource_type": "Prometheus",
        "first_trigger_time": 5000,
        "annotations": "mount /data",
        "metric": {"instance": "db-1"},
    },
    {
        "rule_name": "error logs",
        "severity": "P0",
        "datasource_type": "Loki",
        "first_trigger_time": 9000,
        "annotations": "service api",
        "metric": {"app": "api"},
    },
]


def names(events):
    return [e["rule_name"] for e in events]


def test_page_slice_pages():
    data = list(range(25))
    assert page_slice(data, 1, 10) == list(range(10))
    assert page_slice(data, 3, 10) == list(range(20, 25))
    assert page_slice(data, 0, 10) == page_slice(data, 1, 10)


@pytest.mark.parametrize("index, size", [(1, 0), (1, -5), (30, 10)])
def test_page_slice_empty_pages(index, size):
    assert page_slice(list(range(25)), index, size) == []


def test_filter_by_datasource_type_and_severity():
    assert names(filter_current_events(EVENTS, datasource_type="Prometheus")) == [
        "cpu high",
        "disk full",
    ]
    assert names(filter_current_events(EVENTS, severity="P0")) == ["cpu high", "error logs"]
    assert names(
        filter_current_events(EVENTS, datasource_type="Prometheus", severity="P0")
    ) == ["cpu high"]


def test_scope_window_is_exclusive():
    assert names(filter_current_events(EVENTS, scope=1, now=9000)) == [
        "cpu high",
        "disk full",
    ]
    assert names(filter_current_events(EVENTS, scope=0, now=9000)) == names(EVENTS)


def test_query_matches_name_annotations_and_metric():
    assert names(filter_current_events(EVENTS, query="cpu")) == ["cpu high"]
    assert names(filter_current_events(EVENTS, query="mount")) == ["disk full"]
    assert names(filter_current_events(EVENTS, query="db-1")) == ["disk full"]
    assert names(filter_current_events(EVENTS, query="instance")) == [
        "cpu high",
        "disk full",
    ]


def test_query_is_case_sensitive():
    assert filter_current_events(EVENTS, query="CPU") == []


def test_list_current_events_pages_and_counts():
    first, page = list_current_events(EVENTS, Page(index=1, size=2))
    assert names(first) == ["cpu high", "disk full"]
    assert (page.index, page.size, page.total) == (1, 2, 3)
    second, page = list_current_events(EVENTS, Page(index=2, size=2))
    assert names(second) == ["error logs"]
    assert page.total == 3


def test_list_current_events_decodes_cached_json():
    cached = [json.dumps(event) for event in EVENTS]
    found, page = list_current_events(cached, Page(index=1, size=10), severity="P1")
    assert found == [EVENTS[1]]
    assert page.total == 1