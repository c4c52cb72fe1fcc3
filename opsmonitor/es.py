"""Elasticsearch query filters and hits turned into alert metrics."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Mapping

_SOURCE_KEYS = (
    ("topic", "topic"),
    ("index", "index"),
    ("docker_container", "docker_container"),
    ("k8s_pod_namespace", "k8s_pod_namespace"),
    ("k8s_pod", "k8s_pod"),
    ("k8s_container_name", "k8s_container_name"),
    ("message", "message"),
)


def _compact_json(value: Any) -> str:
    """Compact JSON with sorted keys and HTML-sensitive characters escaped."""
    text = json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"))
    for char, escaped in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escaped)
    return text


@dataclass
class ESQueryFilter:
    """A field/value pair used to filter log queries."""

    field: str = ""
    value: str = ""


@dataclass
class ESQueryResponse:
    """The ``_source`` part of one search hit."""

    topic: str = ""
    index: str = ""
    docker_container: str = ""
    k8s_pod_namespace: str = ""
    k8s_pod: str = ""
    k8s_container_name: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ESQueryResponse":
        """Build from a hit of the form ``{"_source": {...}}``; unknown keys are ignored."""
        source = data.get("_source") or {}
        return cls(**{attr: str(source.get(key, "")) for attr, key in _SOURCE_KEYS})

    def to_dict(self) -> dict:
        return {"_source": {key: getattr(self, attr) for attr, key in _SOURCE_KEYS}}

    def metric(self) -> dict:
        return {"Topic": self.topic, "Index": self.index}

    def fingerprint(self) -> str:
        """MD5 hex digest of the metric's canonical JSON."""
        return hashlib.md5(_compact_json(self.metric()).encode("utf-8")).hexdigest()

    def annotations(self) -> str:
        """The hit rendered as indented JSON."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


__all__ = ["ESQueryFilter", "ESQueryResponse"]