"""Users, tenants and the link between them."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from .duty import MEMBER_TABLE, TENANT_TABLE
from .store import NotFoundError, Store, StoreError, like

TENANT_LINKED_USERS_TABLE = "tenant_linked_users"

ADMIN_USER_ID = "admin"
ADMIN_ROLE = "admin"
DEFAULT_TENANT_ID = "default"

_log = logging.getLogger(__name__)


def _tenants_of(member: Mapping[str, Any]) -> list:
    return list(member.get("tenants") or [])


def _linked_user(user: Mapping[str, Any], role: Optional[str] = None) -> dict:
    return {
        "user_id": user.get("user_id", ""),
        "user_name": user.get("user_name", ""),
        "user_role": user.get("user_role", "") if role is None else role,
    }


class UserRepo:
    """Members that sign in and belong to tenants."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def search(self, query: str = "", join_duty: str = "") -> list:
        """Members matching ``query`` by name, e-mail or phone.

        With ``join_duty`` set to ``"true"`` only members taking part in duty are kept.
        """

        def accept(rec: dict) -> bool:
            if query and not any(
                like(rec.get(column), query) for column in ("user_name", "email", "phone")
            ):
                return False
            if join_duty == "true" and rec.get("join_duty") != "true":
                return False
            return True

        return self._store.find(MEMBER_TABLE, accept)

    def list(self) -> list:
        return self._store.find(MEMBER_TABLE)

    def get(self, user_id: str = "", user_name: str = "", query: str = "") -> dict:
        """The first member matching every given criterion.

        Raises NotFoundError when no member matches.
        """

        def accept(rec: dict) -> bool:
            if user_id and rec.get("user_id") != user_id:
                return False
            if user_name and rec.get("user_name") != user_name:
                return False
            if query and not any(
                like(rec.get(column), query)
                for column in ("user_id", "user_name", "email", "phone")
            ):
                return False
            return True

        try:
            return self._store.first(MEMBER_TABLE, accept)
        except NotFoundError:
            raise NotFoundError("用户不存在") from None

    def create(self, member: Mapping[str, Any]) -> dict:
        """Store a member; the admin user joins the default tenant."""
        record = self._store.create(MEMBER_TABLE, member)
        if record.get("user_id") == ADMIN_USER_ID:
            record["tenants"] = _tenants_of(record) + [DEFAULT_TENANT_ID]
            self._store.updates(MEMBER_TABLE, {"user_id": ADMIN_USER_ID}, record)
        return record

    def update(self, member: Mapping[str, Any]) -> int:
        return self._store.updates(MEMBER_TABLE, {"user_id": member.get("user_id")}, member)

    def delete(self, user_id: str) -> int:
        """Remove a member from every tenant it belongs to, then delete it."""
        member = self.get(user_id=user_id)
        tenants = TenantRepo(self._store)
        for tenant_id in _tenants_of(member):
            tenants.remove_linked_user(tenant_id, user_id)
        return self._store.delete(MEMBER_TABLE, {"user_id": user_id})

    def change_password(self, user_id: str, password: str) -> int:
        return self._store.update(MEMBER_TABLE, {"user_id": user_id}, "password", password)


class TenantRepo:
    """Tenants and the users linked to each of them."""

    def __init__(self, store: Store) -> None:
        self._store = store
        self._users = UserRepo(store)

    def _logged(self, operation, *args):
        try:
            return operation(*args)
        except StoreError as exc:
            _log.error("%s", exc)
            raise

    def _join(self, user_id: str, tenant_id: str) -> None:
        member = self._users.get(user_id=user_id)
        tenants = _tenants_of(member)
        if tenant_id not in tenants:
            tenants.append(tenant_id)
        member["tenants"] = tenants
        self._store.updates(MEMBER_TABLE, {"user_id": user_id}, member)

    def create(self, tenant: Mapping[str, Any]) -> dict:
        """Store a tenant and link the admin user and its creator to it as admins.

        Raises NotFoundError when one of those members does not exist.
        """
        record = self._logged(self._store.create, TENANT_TABLE, tenant)
        tenant_id = record.get("id", "")
        users = [{"user_id": ADMIN_USER_ID, "user_name": ADMIN_USER_ID}]
        creator = record.get("user_id", "")
        if creator != ADMIN_USER_ID:
            users.append({"user_id": creator, "user_name": record.get("create_by", "")})

        self.create_linked_record(tenant_id, [_linked_user(u, ADMIN_ROLE) for u in users])
        for user in users:
            self._join(user["user_id"], tenant_id)
        return record

    def update(self, tenant: Mapping[str, Any]) -> int:
        return self._logged(
            self._store.updates, TENANT_TABLE, {"id": tenant.get("id")}, tenant
        )

    def delete(self, tenant_id: str) -> int:
        """Unlink every user, drop the link record and delete the tenant."""
        linked = self.linked_users(tenant_id)
        for user in linked.get("users") or []:
            self.remove_linked_user(tenant_id, user.get("user_id", ""))
        self.delete_linked_record(tenant_id)
        return self._logged(self._store.delete, TENANT_TABLE, {"id": tenant_id})

    def list(self, user_id: str) -> list:
        """The tenants a member belongs to, in the member's order."""
        member = self._users.get(user_id=user_id)
        return [self.get(tenant_id) for tenant_id in _tenants_of(member)]

    def get(self, tenant_id: str) -> dict:
        """The tenant; raises NotFoundError when missing."""
        return self._store.first(TENANT_TABLE, {"id": tenant_id})

    def create_linked_record(self, tenant_id: str, users: Iterable[Mapping[str, Any]]) -> dict:
        record = {"id": tenant_id, "users": [_linked_user(u) for u in users]}
        return self._logged(self._store.create, TENANT_LINKED_USERS_TABLE, record)

    def add_linked_users(
        self, tenant_id: str, users: Iterable[Mapping[str, Any]], role: str = ""
    ) -> dict:
        """Link users to a tenant; those not yet linked get ``role``.

        Every given member also gets the tenant added to its own list.
        """
        users = list(users)
        record = self.linked_users(tenant_id)
        current = list(record.get("users") or [])
        known = {u.get("user_id") for u in current}
        for user in users:
            if user.get("user_id") not in known:
                current.append(_linked_user(user, role))
                known.add(user.get("user_id"))
        record["users"] = current
        self._store.updates(TENANT_LINKED_USERS_TABLE, {"id": tenant_id}, record)

        for user in users:
            self._join(user.get("user_id", ""), tenant_id)
        return record

    def remove_linked_user(self, tenant_id: str, user_id: str) -> None:
        """Unlink a user from a tenant and drop the tenant from the member's list."""
        record = self.linked_users(tenant_id)
        record["users"] = [
            u for u in record.get("users") or [] if u.get("user_id") != user_id
        ]
        self._store.updates(TENANT_LINKED_USERS_TABLE, {"id": tenant_id}, record)

        member = self._users.get(user_id=user_id)
        member["tenants"] = [tid for tid in _tenants_of(member) if tid != tenant_id]
        self._store.updates(MEMBER_TABLE, {"user_id": user_id}, member)

    def linked_users(self, tenant_id: str) -> dict:
        """The tenant's link record; raises NotFoundError when missing."""
        return self._store.first(TENANT_LINKED_USERS_TABLE, {"id": tenant_id})

    def delete_linked_record(self, tenant_id: str) -> int:
        return self._logged(
            self._store.delete, TENANT_LINKED_USERS_TABLE, {"id": tenant_id}
        )

    def linked_user_info(self, tenant_id: str, user_id: str) -> dict:
        """The linked entry of a user in a tenant, or an empty dict when not linked."""
        record = self.linked_users(tenant_id)
        for user in record.get("users") or []:
            if user.get("user_id") == user_id:
                return user
        return {}

    def change_user_role(self, tenant_id: str, user_id: str, role: str) -> dict:
        record = self.linked_users(tenant_id)
        users = []
        for user in record.get("users") or []:
            if user.get("user_id") == user_id:
                user = {**user, "user_role": role}
            users.append(user)
        record["users"] = users
        self._store.updates(TENANT_LINKED_USERS_TABLE, {"id": tenant_id}, record)
        return record


__all__ = [
    "ADMIN_ROLE",
    "ADMIN_USER_ID",
    "DEFAULT_TENANT_ID",
    "TENANT_LINKED_USERS_TABLE",
    "TenantRepo",
    "UserRepo",
]