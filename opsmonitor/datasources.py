"""Alert data sources per tenant."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .store import Store, StoreError, like

DATASOURCE_TABLE = "datasources"
RULE_TABLE = "alert_rules"


class DatasourceRepo:
    """Data sources that alert rules query."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(self, tenant_id: str = "") -> list:
        """All data sources, or those of one tenant when ``tenant_id`` is given."""
        where = {"tenant_id": tenant_id} if tenant_id else None
        return self._store.find(DATASOURCE_TABLE, where)

    def search(
        self,
        tenant_id: str,
        datasource_id: str = "",
        datasource_type: str = "",
        query: str = "",
    ) -> list:
        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if datasource_id and rec.get("id") != datasource_id:
                return False
            if datasource_type and rec.get("type") != datasource_type:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("type", "id", "name", "description")
            ):
                return False
            return True

        return self._store.find(DATASOURCE_TABLE, accept)

    def get(self, datasource_id: str) -> Optional[dict]:
        """The data source with this id, or None."""
        found = self._store.find(DATASOURCE_TABLE, {"id": datasource_id})
        return found[0] if found else None

    def create(self, datasource: Mapping[str, Any]) -> dict:
        return self._store.create(DATASOURCE_TABLE, datasource)

    def update(self, datasource: Mapping[str, Any]) -> int:
        where = {"id": datasource.get("id"), "tenant_id": datasource.get("tenant_id")}
        return self._store.updates(DATASOURCE_TABLE, where, datasource)

    def delete(self, tenant_id: str, datasource_id: str) -> int:
        """Delete a data source; refused while an alert rule refers to it."""
        bound = self._store.count(
            RULE_TABLE,
            lambda rec: rec.get("tenant_id") == tenant_id
            and like(rec.get("datasource_id_list"), datasource_id),
        )
        if bound:
            raise StoreError(f"无法删除数据源 {datasource_id}, 因为已有告警规则绑定")
        return self._store.delete(
            DATASOURCE_TABLE, {"tenant_id": tenant_id, "id": datasource_id}
        )

    def get_instance(self, datasource_id: str) -> dict:
        """The data source with this id; raises NotFoundError when missing."""
        return self._store.first(DATASOURCE_TABLE, {"id": datasource_id})


__all__ = ["DATASOURCE_TABLE", "DatasourceRepo", "RULE_TABLE"]