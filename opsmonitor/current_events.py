"""Filtering and paging of the alerts that are firing right now."""

from __future__ import annotations

import json
import time
from typing import Any, Iterable, Mapping, Optional, Union

from .es import _compact_json
from .store import Page

_SECONDS_PER_DAY = 24 * 60 * 60

Event = Union[Mapping[str, Any], str, bytes]


def _decode(event: Event) -> dict:
    """An event as a dict; cached JSON text is decoded first."""
    if isinstance(event, (str, bytes)):
        text = event.decode("utf-8") if isinstance(event, bytes) else event
        text = text.replace('"[\\', "[", 1).replace('\\"]"', '"]', 1)
        return json.loads(text)
    return dict(event)


def page_slice(data: Iterable[Any], index: int, size: int) -> list:
    """One page of ``data``; a page index below 1 counts as 1.

    A size of zero or less, or an index beyond the number of items, gives an
    empty page.
    """
    items = list(data)
    if index <= 0:
        index = 1
    if size <= 0 or index > len(items):
        return []
    offset = (index - 1) * size
    return items[offset:offset + size]


def filter_current_events(
    events: Iterable[Event],
    datasource_type: str = "",
    severity: str = "",
    scope: int = 0,
    query: str = "",
    now: Optional[float] = None,
) -> list[dict]:
    """Events matching every given criterion, in their original order.

    ``scope`` keeps events first triggered within that many days before ``now``
    (both bounds exclusive). ``query`` is a case-sensitive substring of the rule
    name, the annotations or the metric's JSON.
    """
    items = [_decode(event) for event in events]
    if datasource_type:
        items = [e for e in items if e.get("datasource_type") == datasource_type]
    if severity:
        items = [e for e in items if e.get("severity") == severity]
    if scope > 0:
        current = time.time() if now is None else now
        until = int(current)
        since = int(current - scope * _SECONDS_PER_DAY)
        items = [
            e for e in items if since < (e.get("first_trigger_time") or 0) < until
        ]
    if query:
        items = [
            e
            for e in items
            if query in str(e.get("rule_name") or "")
            or query in str(e.get("annotations") or "")
            or query in _compact_json(e.get("metric"))
        ]
    return items


def list_current_events(
    events: Iterable[Event],
    page: Optional[Page] = None,
    datasource_type: str = "",
    severity: str = "",
    scope: int = 0,
    query: str = "",
    now: Optional[float] = None,
) -> tuple[list, Page]:
    """One page of matching events and the page with its total filled in."""
    page = page or Page()
    matched = filter_current_events(events, datasource_type, severity, scope, query, now)
    result = Page(index=page.index, size=page.size, total=len(matched))
    return page_slice(matched, page.index, page.size), result


__all__ = ["filter_current_events", "list_current_events", "page_slice"]