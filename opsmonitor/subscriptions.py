"""User subscriptions to alert rules."""

from __future__ import annotations

import time
import uuid
from typing import Any, Mapping, Optional

from .store import NotFoundError, Store, StoreError, like

SUBSCRIBE_TABLE = "alert_subscribe"


class AlreadySubscribedError(StoreError):
    """Raised when a user subscribes to a rule a second time."""


def _rand_id() -> str:
    return uuid.uuid4().hex[:16]


class SubscribeRepo:
    """Stored subscriptions, keyed by tenant and subscription id."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(self, tenant_id: str, query: str = "") -> list:
        def accept(rec: dict) -> bool:
            if rec.get("s_tenant_id") != tenant_id:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("s_rule_id", "s_rule_name", "s_rule_type")
            ):
                return False
            return True

        return self._store.find(SUBSCRIBE_TABLE, accept)

    def get(
        self,
        tenant_id: str,
        subscription_id: str = "",
        user_id: str = "",
        rule_id: str = "",
    ) -> dict:
        """The first matching subscription; raises NotFoundError when there is none."""
        where = {"s_tenant_id": tenant_id}
        if subscription_id:
            where["s_id"] = subscription_id
        if user_id:
            where["s_user_id"] = user_id
        if rule_id:
            where["s_rule_id"] = rule_id
        return self._store.first(SUBSCRIBE_TABLE, where)

    def create(self, subscription: Mapping[str, Any]) -> dict:
        return self._store.create(SUBSCRIBE_TABLE, subscription)

    def delete(self, tenant_id: str, subscription_id: str) -> int:
        return self._store.delete(
            SUBSCRIBE_TABLE, {"s_tenant_id": tenant_id, "s_id": subscription_id}
        )


class SubscribeService:
    """Subscription operations with the duplicate check on create."""

    def __init__(self, repo: SubscribeRepo) -> None:
        self._repo = repo

    def list(self, tenant_id: str, query: str = "") -> list:
        return self._repo.list(tenant_id, query)

    def get(
        self,
        tenant_id: str,
        subscription_id: str = "",
        user_id: str = "",
        rule_id: str = "",
    ) -> dict:
        return self._repo.get(tenant_id, subscription_id, user_id, rule_id)

    def create(self, subscription: Mapping[str, Any], now: Optional[float] = None) -> dict:
        """Subscribe a user to a rule under a fresh ``as-`` id.

        Raises AlreadySubscribedError when the user already follows the rule.
        """
        try:
            self._repo.get(
                subscription.get("s_tenant_id", ""),
                user_id=subscription.get("s_user_id", ""),
                rule_id=subscription.get("s_rule_id", ""),
            )
        except NotFoundError:
            pass
        else:
            raise AlreadySubscribedError("用户已订阅该规则, 请勿重复创建!")

        record = dict(subscription)
        record["s_id"] = "as-" + _rand_id()
        record["s_create_at"] = int(time.time() if now is None else now)
        return self._repo.create(record)

    def delete(self, tenant_id: str, subscription_id: str) -> int:
        return self._repo.delete(tenant_id, subscription_id)


__all__ = ["AlreadySubscribedError", "SUBSCRIBE_TABLE", "SubscribeRepo", "SubscribeService"]