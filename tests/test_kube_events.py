from opsmonitor.kube_events import EVENT_RESOURCE_TYPES, EventReason, reasons_for


def test_every_resource_type_has_reasons():
    for resource in EVENT_RESOURCE_TYPES:
        assert len(reasons_for(resource)) > 0


def test_pod_reasons():
    types = [r.type for r in reasons_for("Pods")]
    assert types[0] == "Failed"
    assert "CrashLoopBackOff" in types
    assert "FailedScheduling" in types


def test_node_reasons():
    assert [r.type for r in reasons_for("Nodes")] == [
        "NodeNotReady",
        "NodeUnderMemoryPressure",
        "NodeUnderDiskPressure",
    ]


def test_label_mentions_type():
    for resource in EVENT_RESOURCE_TYPES:
        for reason in reasons_for(resource):
            assert reason.type_cn.endswith(f"({reason.type})")


def test_unknown_resource():
    assert reasons_for("Deployments") == []


def test_result_is_a_copy():
    first = reasons_for("HPA")
    first.clear()
    assert [r.type for r in reasons_for("HPA")] == [
        "FailedRescale",
        "FailedGetResourceMetric",
        "FailedGetExternalMetric",
    ]


def test_to_dict_keys():
    reason = reasons_for("PVC/PV")[0]
    assert reason.to_dict() == {"type": "FailedBinding", "typeCN": "PVC/PV绑定失败(FailedBinding)"}
    assert EventReason("A", "B").to_dict() == {"type": "A", "typeCN": "B"}