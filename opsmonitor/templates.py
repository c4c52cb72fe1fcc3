"""Alert rule templates and the groups that hold them."""

from __future__ import annotations

from typing import Any, Mapping

from .store import Store, like

RULE_TEMPLATE_TABLE = "rule_templates"
RULE_TEMPLATE_GROUP_TABLE = "rule_template_groups"


class RuleTemplateRepo:
    """Ready-made alert rules, filed under a template group by name."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(self, rule_group_name: str, query: str = "") -> list:
        """Templates of one group, optionally matching ``query`` by name or data source type."""

        def accept(rec: dict) -> bool:
            if rec.get("rule_group_name") != rule_group_name:
                return False
            if query and not (
                like(rec.get("rule_name"), query) or like(rec.get("datasource_type"), query)
            ):
                return False
            return True

        return self._store.find(RULE_TEMPLATE_TABLE, accept)

    def create(self, template: Mapping[str, Any]) -> dict:
        return self._store.create(RULE_TEMPLATE_TABLE, template)

    def delete(self, rule_group_name: str, rule_name: str) -> int:
        return self._store.delete(
            RULE_TEMPLATE_TABLE,
            {"rule_group_name": rule_group_name, "rule_name": rule_name},
        )


class RuleTemplateGroupRepo:
    """Named groups of rule templates."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(self, query: str = "") -> list:
        """Groups matching ``query``, each with ``number`` set to its template count."""

        def accept(rec: dict) -> bool:
            return not query or like(rec.get("name"), query) or like(
                rec.get("description"), query
            )

        groups = self._store.find(RULE_TEMPLATE_GROUP_TABLE, accept)
        for group in groups:
            group["number"] = self._store.count(
                RULE_TEMPLATE_TABLE, {"rule_group_name": group.get("name")}
            )
        return groups

    def create(self, group: Mapping[str, Any]) -> dict:
        return self._store.create(RULE_TEMPLATE_GROUP_TABLE, group)

    def delete(self, name: str) -> int:
        return self._store.delete(RULE_TEMPLATE_GROUP_TABLE, {"name": name})


__all__ = [
    "RULE_TEMPLATE_GROUP_TABLE",
    "RULE_TEMPLATE_TABLE",
    "RuleTemplateGroupRepo",
    "RuleTemplateRepo",
]