"""History of resolved alert events."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .store import Page, Store, like, paginate

HISTORY_EVENT_TABLE = "alert_his_events"


class EventRepo:
    """Resolved alert events, searchable and paged."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def history(
        self,
        tenant_id: str,
        page: Optional[Page] = None,
        query: str = "",
        datasource_type: str = "",
        severity: str = "",
        start_at: int = 0,
        end_at: int = 0,
    ) -> tuple[list, Page]:
        """One page of matching events, most recently recovered first.

        The time window applies only when both ends are given, and is exclusive.
        """
        page = page or Page()

        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("rule_name", "severity", "annotations")
            ):
                return False
            if datasource_type and rec.get("datasource_type") != datasource_type:
                return False
            if severity and rec.get("severity") != severity:
                return False
            if start_at and end_at:
                first = rec.get("first_trigger_time") or 0
                if not start_at < first < end_at:
                    return False
            return True

        events = sorted(
            self._store.find(HISTORY_EVENT_TABLE, accept),
            key=lambda rec: rec.get("recover_time") or 0,
            reverse=True,
        )
        result = Page(index=page.index, size=page.size, total=len(events))
        return paginate(events, page), result

    def create_history(self, event: Mapping[str, Any]) -> dict:
        return self._store.create(HISTORY_EVENT_TABLE, event)


__all__ = ["EventRepo", "HISTORY_EVENT_TABLE"]