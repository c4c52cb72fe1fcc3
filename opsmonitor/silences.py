"""Alert silences per tenant."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .store import Page, Store, like, paginate

SILENCE_TABLE = "alert_silences"

ALL_STATUSES = 2


class SilenceRepo:
    """Silences that mute alerts by fingerprint for a while."""

    def __init__(self, store: Store) -> None:
        self._store = store

    def list(
        self,
        tenant_id: str,
        page: Optional[Page] = None,
        status: int = ALL_STATUSES,
        query: str = "",
    ) -> tuple[list, Page]:
        """One page of a tenant's silences.

        A ``status`` below 2 keeps only silences in that status; 2 or more keeps all.
        """
        page = page or Page()

        def accept(rec: dict) -> bool:
            if rec.get("tenant_id") != tenant_id:
                return False
            if status < ALL_STATUSES and rec.get("status") != status:
                return False
            if query and not (like(rec.get("id"), query) or like(rec.get("comment"), query)):
                return False
            return True

        silences = self._store.find(SILENCE_TABLE, accept)
        result = Page(index=page.index, size=page.size, total=len(silences))
        return paginate(silences, page), result

    def create(self, silence: Mapping[str, Any]) -> dict:
        return self._store.create(SILENCE_TABLE, silence)

    def update(self, silence: Mapping[str, Any]) -> int:
        where = {"tenant_id": silence.get("tenant_id"), "id": silence.get("id")}
        return self._store.updates(SILENCE_TABLE, where, silence)

    def delete(self, tenant_id: str, silence_id: str) -> int:
        return self._store.delete(SILENCE_TABLE, {"tenant_id": tenant_id, "id": silence_id})


__all__ = ["ALL_STATUSES", "SILENCE_TABLE", "SilenceRepo"]