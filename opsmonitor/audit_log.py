"""Audit log records: storage, listing and search."""

from __future__ import annotations

import time
from typing import Any, Mapping, Optional

from .store import Page, Store, like, paginate

AUDIT_LOG_TABLE = "audit_log"

_SECONDS_PER_DAY = 24 * 60 * 60


def _newest_first(records: list) -> list:
    return sorted(records, key=lambda rec: rec.get("created_at") or 0, reverse=True)


class AuditLogRepo:
    """Audit log entries kept per tenant, newest first."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def create(self, record: Mapping[str, Any]) -> dict:
        return self._store.create(AUDIT_LOG_TABLE, record)

    def _page(self, records: list, page: Page) -> tuple[list, Page]:
        ordered = _newest_first(records)
        result = Page(index=page.index, size=page.size, total=len(ordered))
        return paginate(ordered, page), result

    def list(self, tenant_id: str, page: Optional[Page] = None) -> tuple[list, Page]:
        """One page of a tenant's entries and the page with its total filled in."""
        page = page or Page()
        records = self._store.find(AUDIT_LOG_TABLE, {"tenant_id": tenant_id})
        return self._page(records, page)

    def search(
        self,
        tenant_id: str,
        page: Optional[Page] = None,
        scope: str = "",
        query: str = "",
        now: Optional[float] = None,
    ) -> tuple[list, Page]:
        """Like ``list``, limited to the last ``scope`` days and to entries matching ``query``.

        A scope that is not a number counts as zero days.
        """
        page = page or Page()
        since: Optional[int] = None
        if scope:
            try:
                days = int(scope)
            except ValueError:
                days = 0
            current = time.time() if now is None else now
            since = int(current - days * _SECONDS_PER_DAY)

        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if since is not None and (rec.get("created_at") or 0) < since:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("username", "ip_address", "audit_type")
            ):
                return False
            return True

        return self._page(self._store.find(AUDIT_LOG_TABLE, accept), page)


__all__ = ["AUDIT_LOG_TABLE", "AuditLogRepo"]