"""Alert rules and the groups they are organised in."""

from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional

from .datasources import RULE_TABLE
from .duty import TENANT_TABLE
from .store import Page, Store, StoreError, like, paginate

RULE_GROUP_TABLE = "rule_groups"


def _rand_id() -> str:
    return uuid.uuid4().hex[:16]


def _enabled(rec: Mapping[str, Any]) -> bool:
    return rec.get("enabled") in (True, "1", "true")


class RuleRepo:
    """Alert rules per tenant."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def has_quota(self, tenant_id: str) -> bool:
        """True while the tenant has fewer rules than its rule quota."""
        tenants = self._store.find(TENANT_TABLE, {"id": tenant_id})
        limit = (tenants[0].get("rule_number") or 0) if tenants else 0
        return self._store.count(RULE_TABLE, {"tenant_id": tenant_id}) < limit

    def search(self, tenant_id: str, rule_group_id: str, rule_id: str) -> dict:
        """The rule; raises NotFoundError when missing."""
        return self._store.first(
            RULE_TABLE,
            {"tenant_id": tenant_id, "rule_group_id": rule_group_id, "rule_id": rule_id},
        )

    def list(
        self,
        tenant_id: str,
        page: Optional[Page] = None,
        rule_group_id: str = "",
        datasource_type: str = "",
        query: str = "",
        status: str = "all",
    ) -> tuple[list, Page]:
        """One page of matching rules; ``status`` is ``all``, ``enabled`` or ``disabled``."""
        page = page or Page()

        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if rule_group_id and rec.get("rule_group_id") != rule_group_id:
                return False
            if datasource_type and rec.get("datasource_type") != datasource_type:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("rule_id", "rule_name", "description")
            ):
                return False
            if status == "enabled" and not _enabled(rec):
                return False
            if status == "disabled" and _enabled(rec):
                return False
            return True

        rules = self._store.find(RULE_TABLE, accept)
        result = Page(index=page.index, size=page.size, total=len(rules))
        return paginate(rules, page), result

    def create(self, rule: Mapping[str, Any]) -> dict:
        return self._store.create(RULE_TABLE, rule)

    def update(self, rule: Mapping[str, Any]) -> int:
        where = {"tenant_id": rule.get("tenant_id"), "rule_id": rule.get("rule_id")}
        return self._store.updates(RULE_TABLE, where, rule)

    def delete(self, tenant_id: str, rule_id: str) -> int:
        return self._store.delete(RULE_TABLE, {"tenant_id": tenant_id, "rule_id": rule_id})

    def is_enabled(self, rule_id: str) -> bool:
        """True when an enabled rule with this id exists."""
        return self._store.count(
            RULE_TABLE, lambda rec: rec.get("rule_id") == rule_id and _enabled(rec)
        ) > 0

    def get(self, rule_id: str) -> Optional[dict]:
        """The rule with this id in any tenant, or None."""
        found = self._store.find(RULE_TABLE, {"rule_id": rule_id})
        return found[0] if found else None


class RuleGroupRepo:
    """Groups of alert rules per tenant."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(
        self, tenant_id: str, page: Optional[Page] = None, query: str = ""
    ) -> tuple[list, Page]:
        """One page of groups, each with ``number`` set to how many rules it holds."""
        page = page or Page()

        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if query and not any(
                like(rec.get(column), query) for column in ("id", "name", "description")
            ):
                return False
            return True

        groups = self._store.find(RULE_GROUP_TABLE, accept)
        result = Page(index=page.index, size=page.size, total=len(groups))
        selected = paginate(groups, page)
        for group in selected:
            group["number"] = self._store.count(
                RULE_TABLE, {"tenant_id": tenant_id, "rule_group_id": group.get("id")}
            )
        return selected, result

    def create(self, group: Mapping[str, Any]) -> dict:
        """Store a group under a fresh ``rg-`` id; the name must be unused."""
        name = group.get("name")
        if self._store.count(RULE_GROUP_TABLE, lambda rec: rec.get("name") == name and name):
            raise StoreError("规则组名称已存在")
        record = dict(group)
        record["id"] = "rg-" + _rand_id()
        return self._store.create(RULE_GROUP_TABLE, record)

    def update(self, group: Mapping[str, Any]) -> int:
        where = {"tenant_id": group.get("tenant_id"), "id": group.get("id")}
        return self._store.updates(RULE_GROUP_TABLE, where, group)

    def delete(self, tenant_id: str, group_id: str) -> int:
        """Delete a group; refused while it still holds rules."""
        if self._store.count(RULE_TABLE, {"tenant_id": tenant_id, "rule_group_id": group_id}):
            raise StoreError(f"无法删除规则组 {group_id}, 因为规则组不为空")
        return self._store.delete(RULE_GROUP_TABLE, {"tenant_id": tenant_id, "id": group_id})


__all__ = ["RULE_GROUP_TABLE", "RuleGroupRepo", "RuleRepo"]