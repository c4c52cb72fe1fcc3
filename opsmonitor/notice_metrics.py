"""Daily counts of notices sent over the last week, by severity."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from .notices import NoticeRepo
from .store import StoreError

SEVERITIES = ("P0", "P1", "P2")
DAYS = 7

_log = logging.getLogger(__name__)


@dataclass
class RecordMetric:
    """Dates (oldest first) and the notice count per severity on each date."""

    date: list = field(default_factory=list)
    p0: list = field(default_factory=list)
    p1: list = field(default_factory=list)
    p2: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "date": list(self.date),
            "series": {"p0": list(self.p0), "p1": list(self.p1), "p2": list(self.p2)},
        }


def record_metric(
    notices: NoticeRepo, tenant_id: str, today: Optional[date] = None
) -> RecordMetric:
    """Count a tenant's notice records for each of the last seven days.

    A count that cannot be read is logged and reported as zero.
    """
    current = today or date.today()
    if isinstance(current, datetime):
        current = current.date()
    days = [
        (current - timedelta(days=offset)).isoformat() for offset in range(DAYS - 1, -1, -1)
    ]
    counts: dict[str, list] = {severity: [] for severity in SEVERITIES}
    for day in days:
        for severity in SEVERITIES:
            try:
                count = notices.count_records(tenant_id, day, severity)
            except StoreError as exc:
                _log.error("%s", exc)
                count = 0
            counts[severity].append(count)
    return RecordMetric(date=days, p0=counts["P0"], p1=counts["P1"], p2=counts["P2"])


__all__ = ["DAYS", "RecordMetric", "SEVERITIES", "record_metric"]