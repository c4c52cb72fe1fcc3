"""Kubernetes event resource types and the event reasons watched for each."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EventReason:
    """An event reason and its human-readable label."""

    type: str
    type_cn: str

    def to_dict(self) -> dict:
        return {"type": self.type, "typeCN": self.type_cn}


EVENT_RESOURCE_TYPES = ("Pods", "Nodes", "PVC/PV", "HPA")

EVENT_REASONS: dict[str, tuple[EventReason, ...]] = {
    "Pods": (
        EventReason("Failed", "容器启动失败(Failed)"),
        EventReason("Unhealthy", "容器健康状况不佳(Unhealthy)"),
        EventReason("CrashLoopBackOff", "容器反复崩溃和重启(CrashLoopBackOff)"),
        EventReason("FailedMount", "挂载卷失败(FailedMount)"),
        EventReason("FailedAttachVolume", "附加卷到节点失败(FailedAttachVolume)"),
        EventReason("DeadlineExceeded", "Pod超过其运行期限(DeadlineExceeded)"),
        EventReason("FailedScheduling", "Pod调度失败(FailedScheduling)"),
    ),
    "Nodes": (
        EventReason("NodeNotReady", "节点处于不可用状态(NodeNotReady)"),
        EventReason("NodeUnderMemoryPressure", "节点处于内存压力下(NodeUnderMemoryPressure)"),
        EventReason("NodeUnderDiskPressure", "节点处于磁盘压力下(NodeUnderDiskPressure)"),
    ),
    "PVC/PV": (
        EventReason("FailedBinding", "PVC/PV绑定失败(FailedBinding)"),
    ),
    "HPA": (
        EventReason("FailedRescale", "调整副本数失败(FailedRescale)"),
        EventReason("FailedGetResourceMetric", "获取资源指标失败(FailedGetResourceMetric)"),
        EventReason("FailedGetExternalMetric", "获取外部指标失败(FailedGetExternalMetric)"),
    ),
}


def reasons_for(resource_type: str) -> list[EventReason]:
    """Reasons known for a resource type; empty for an unknown one."""
    return list(EVENT_REASONS.get(resource_type, ()))


__all__ = ["EVENT_REASONS", "EVENT_RESOURCE_TYPES", "EventReason", "reasons_for"]