"""User roles and the permission catalogue."""

from __future__ import annotations

from typing import Any, Mapping

from .store import Store

USER_ROLE_TABLE = "user_roles"
USER_PERMISSIONS_TABLE = "user_permissions"


class UserRoleRepo:
    """Roles that bundle permissions for users."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(self) -> list:
        return self._store.find(USER_ROLE_TABLE)

    def create(self, role: Mapping[str, Any]) -> dict:
        return self._store.create(USER_ROLE_TABLE, role)

    def update(self, role: Mapping[str, Any]) -> int:
        return self._store.updates(USER_ROLE_TABLE, {"id": role.get("id")}, role)

    def delete(self, role_id: str) -> int:
        return self._store.delete(USER_ROLE_TABLE, {"id": role_id})


class UserPermissionsRepo:
    """Read access to the permission catalogue."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(self) -> list:
        return self._store.find(USER_PERMISSIONS_TABLE)


__all__ = ["USER_PERMISSIONS_TABLE", "USER_ROLE_TABLE", "UserPermissionsRepo", "UserRoleRepo"]