"""Endpoint probing rules per tenant."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .store import Store, StoreError, like

PROBING_TABLE = "probing_rules"

_log = logging.getLogger(__name__)


class ProbingRepo:
    """Rules that probe HTTP, ICMP, TCP and SSL endpoints."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def _logged(self, operation, *args):
        try:
            return operation(*args)
        except StoreError as exc:
            _log.error("%s", exc)
            raise

    def create(self, rule: Mapping[str, Any]) -> dict:
        return self._logged(self._store.create, PROBING_TABLE, rule)

    def update(self, rule: Mapping[str, Any]) -> int:
        where = {"tenant_id": rule.get("tenant_id"), "rule_id": rule.get("rule_id")}
        return self._logged(self._store.updates, PROBING_TABLE, where, rule)

    def delete(self, tenant_id: str, rule_id: str) -> int:
        where = {"tenant_id": tenant_id, "rule_id": rule_id}
        return self._logged(self._store.delete, PROBING_TABLE, where)

    def list(self, tenant_id: str, rule_type: str = "", query: str = "") -> list:
        """A tenant's rules, by type and by text in the endpoint configuration."""

        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if rule_type and rec.get("rule_type") != rule_type:
                return False
            if query and not like(rec.get("probing_endpoint_config"), query):
                return False
            return True

        return self._store.find(PROBING_TABLE, accept)

    def search(self, tenant_id: str = "", rule_id: str = "") -> Optional[dict]:
        """The rule with this id (within the tenant when given), or None."""
        where = {"rule_id": rule_id}
        if tenant_id:
            where["tenant_id"] = tenant_id
        found = self._store.find(PROBING_TABLE, where)
        return found[0] if found else None


__all__ = ["PROBING_TABLE", "ProbingRepo"]