"""Notice targets, their delivery records, and notice templates."""

from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional

from .datasources import RULE_TABLE
from .duty import NOTICE_TABLE, TENANT_TABLE
from .store import Store, StoreError, like

NOTICE_RECORD_TABLE = "notice_records"
NOTICE_TEMPLATE_TABLE = "notice_template_examples"


def _rand_id() -> str:
    return uuid.uuid4().hex[:16]


class NoticeRepo:
    """Notice targets per tenant and the record of notices sent."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def get(self, tenant_id: str, uuid: str) -> dict:
        """The notice target; raises NotFoundError when missing."""
        return self._store.first(NOTICE_TABLE, {"tenant_id": tenant_id, "uuid": uuid})

    def has_quota(self, tenant_id: str) -> bool:
        """True while the tenant has fewer notice targets than its quota."""
        tenants = self._store.find(TENANT_TABLE, {"id": tenant_id})
        limit = (tenants[0].get("notice_number") or 0) if tenants else 0
        return self._store.count(NOTICE_TABLE, {"tenant_id": tenant_id}) < limit

    def search(self, query: str = "", notice_tmpl_id: str = "") -> list:
        """Notice targets across tenants, filtered by template and free text."""

        def accept(rec: dict) -> bool:
            if notice_tmpl_id and rec.get("notice_tmpl_id") != notice_tmpl_id:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("uuid", "name", "env", "notice_type")
            ):
                return False
            return True

        return self._store.find(NOTICE_TABLE, accept)

    def list(self, tenant_id: str) -> list:
        return self._store.find(NOTICE_TABLE, {"tenant_id": tenant_id})

    def create(self, notice: Mapping[str, Any]) -> dict:
        return self._store.create(NOTICE_TABLE, notice)

    def update(self, notice: Mapping[str, Any]) -> int:
        where = {"tenant_id": notice.get("tenant_id"), "uuid": notice.get("uuid")}
        return self._store.updates(NOTICE_TABLE, where, notice)

    def delete(self, tenant_id: str, uuid: str) -> int:
        """Delete a notice target; refused while an alert rule refers to it."""
        bound = self._store.count(
            RULE_TABLE,
            lambda rec: rec.get("notice_id") == uuid or like(rec.get("notice_group"), uuid),
        )
        if bound:
            raise StoreError(f"无法删除通知对象 {uuid}, 因为已有告警规则绑定")
        return self._store.delete(NOTICE_TABLE, {"tenant_id": tenant_id, "uuid": uuid})

    def add_record(self, record: Mapping[str, Any]) -> dict:
        return self._store.create(NOTICE_RECORD_TABLE, record)

    def list_records(
        self,
        tenant_id: str,
        severity: str = "",
        status: str = "",
        query: str = "",
    ) -> list:
        """A tenant's delivery records, newest first."""

        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if severity and rec.get("severity") != severity:
                return False
            if status and rec.get("status") != status:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("rule_name", "alarm_msg", "err_msg")
            ):
                return False
            return True

        records = self._store.find(NOTICE_RECORD_TABLE, accept)
        return sorted(records, key=lambda rec: rec.get("create_at") or 0, reverse=True)

    def count_records(self, tenant_id: str, date: str = "", severity: str = "") -> int:
        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if date and rec.get("date") != date:
                return False
            if severity and rec.get("severity") != severity:
                return False
            return True

        return self._store.count(NOTICE_RECORD_TABLE, accept)


class NoticeTemplateRepo:
    """Message templates that notice targets render alerts with."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(self) -> list:
        return self._store.find(NOTICE_TEMPLATE_TABLE)

    def search(self, template_id: str = "", notice_type: str = "", query: str = "") -> list:
        def accept(rec: dict) -> bool:
            if template_id and rec.get("id") != template_id:
                return False
            if notice_type and rec.get("notice_type") != notice_type:
                return False
            if query and not (
                like(rec.get("name"), query) or like(rec.get("description"), query)
            ):
                return False
            return True

        return self._store.find(NOTICE_TEMPLATE_TABLE, accept)

    def create(self, template: Mapping[str, Any]) -> dict:
        """Store a template under a fresh ``nt-`` id."""
        record = dict(template)
        record["id"] = "nt-" + _rand_id()
        return self._store.create(NOTICE_TEMPLATE_TABLE, record)

    def update(self, template: Mapping[str, Any]) -> int:
        return self._store.updates(NOTICE_TEMPLATE_TABLE, {"id": template.get("id")}, template)

    def delete(self, template_id: str) -> int:
        return self._store.delete(NOTICE_TEMPLATE_TABLE, {"id": template_id})

    def get(self, template_id: str = "") -> Optional[dict]:
        """The template with this id (or the first one when no id is given), or None."""
        where = {"id": template_id} if template_id else None
        found = self._store.find(NOTICE_TEMPLATE_TABLE, where)
        return found[0] if found else None


__all__ = [
    "NOTICE_RECORD_TABLE",
    "NOTICE_TEMPLATE_TABLE",
    "NoticeRepo",
    "NoticeTemplateRepo",
]