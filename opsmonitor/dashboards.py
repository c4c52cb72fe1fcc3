"""Dashboards and dashboard folders per tenant."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from .store import Store, StoreError, like

DASHBOARD_TABLE = "dashboards"
DASHBOARD_FOLDER_TABLE = "dashboard_folders"

_log = logging.getLogger(__name__)


class DashboardRepo:
    """Dashboards and their folders."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def _logged(self, operation, *args):
        try:
            return operation(*args)
        except StoreError as exc:
            _log.error("%s", exc)
            raise

    def create(self, dashboard: Mapping[str, Any]) -> dict:
        return self._logged(self._store.create, DASHBOARD_TABLE, dashboard)

    def update(self, dashboard: Mapping[str, Any]) -> int:
        where = {"tenant_id": dashboard.get("tenant_id"), "id": dashboard.get("id")}
        return self._logged(self._store.updates, DASHBOARD_TABLE, where, dashboard)

    def delete(self, tenant_id: str, dashboard_id: str) -> int:
        where = {"tenant_id": tenant_id, "id": dashboard_id}
        return self._logged(self._store.delete, DASHBOARD_TABLE, where)

    def search(self, tenant_id: str, query: str = "") -> list:
        """A tenant's dashboards, or those matching ``query``.

        With a query, a name match counts only within the tenant, while a
        description or url match counts in any tenant.
        """
        if not query:
            return self._store.find(DASHBOARD_TABLE, {"tenant_id": tenant_id})

        def accept(rec: dict) -> bool:
            return (
                (rec.get("tenant_id") == tenant_id and like(rec.get("name"), query))
                or like(rec.get("description"), query)
                or like(rec.get("url"), query)
            )

        return self._store.find(DASHBOARD_TABLE, accept)

    def create_folder(self, folder: Mapping[str, Any]) -> dict:
        return self._logged(self._store.create, DASHBOARD_FOLDER_TABLE, folder)

    def update_folder(self, folder: Mapping[str, Any]) -> int:
        where = {"tenant_id": folder.get("tenant_id"), "id": folder.get("id")}
        return self._logged(self._store.updates, DASHBOARD_FOLDER_TABLE, where, folder)

    def delete_folder(self, tenant_id: str, folder_id: str) -> int:
        where = {"tenant_id": tenant_id, "id": folder_id}
        return self._logged(self._store.delete, DASHBOARD_FOLDER_TABLE, where)


__all__ = ["DASHBOARD_FOLDER_TABLE", "DASHBOARD_TABLE", "DashboardRepo"]