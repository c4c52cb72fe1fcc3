"""Service health report: host facts, resource usage and dependency checks."""

from __future__ import annotations

import gc
import os
import platform
import socket
import threading
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any, Callable, Mapping, Optional

import psutil

STATUS_UP = "UP"
STATUS_DOWN = "DOWN"
DEPENDENCY_OK = "正常"
DEPENDENCY_UNAVAILABLE = "不可用: "

CPU_SAMPLE_SECONDS = 1.0

_START_TIME = datetime.now(timezone.utc)
_START_PERF = time.perf_counter()


class _GcTracker:
    """Records pause length and time of garbage collections."""

    def __init__(self) -> None:
        self._started: Optional[float] = None
        self.last_pause_ms = 0.0
        self.total_seconds = 0.0
        self.last_finished: Optional[datetime] = None

    def __call__(self, phase: str, info: Mapping[str, Any]) -> None:
        if phase == "start":
            self._started = time.perf_counter()
        elif phase == "stop" and self._started is not None:
            elapsed = time.perf_counter() - self._started
            self._started = None
            self.last_pause_ms = elapsed * 1000.0
            self.total_seconds += elapsed
            self.last_finished = datetime.now(timezone.utc)


_GC_TRACKER = _GcTracker()
gc.callbacks.append(_GC_TRACKER)


@dataclass
class SystemInfo:
    hostname: str = ""
    platform: str = ""
    os: str = ""
    kernel_arch: str = ""
    kernel_version: str = ""
    python_version: str = ""
    num_cpu: int = 0
    uptime: int = 0
    boot_time: Optional[datetime] = None


@dataclass
class ResourceUsage:
    cpu_usage: float = 0.0
    cpu_load: list = field(default_factory=list)
    memory_usage: float = 0.0
    memory_total: int = 0
    memory_free: int = 0
    memory_used: int = 0
    swap_usage: float = 0.0
    swap_total: int = 0
    disk_usage: float = 0.0
    disk_total: int = 0
    disk_free: int = 0
    active_threads: int = 0
    threads: int = 0
    gc_pause: float = 0.0
    gc_runs: int = 0


@dataclass
class ApplicationInfo:
    version: str = ""
    start_time: Optional[datetime] = None
    environment: str = ""
    pid: int = 0
    memory_used: int = 0
    num_fd: int = 0
    cpu_percent: float = 0.0
    last_gc: Optional[datetime] = None
    next_gc: int = 0
    gc_cpu_fraction: float = 0.0


@dataclass(frozen=True)
class Thresholds:
    """Limits above which the service reports itself as down (gc_pause in ms)."""

    cpu_usage: float = 80.0
    memory_usage: float = 80.0
    disk_usage: float = 85.0
    gc_pause: float = 100.0
    active_threads: int = 10000


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


@dataclass
class HealthStatus:
    status: str = STATUS_UP
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    dependencies: dict = field(default_factory=dict)
    system: SystemInfo = field(default_factory=SystemInfo)
    resources: ResourceUsage = field(default_factory=ResourceUsage)
    application: ApplicationInfo = field(default_factory=ApplicationInfo)

    def to_dict(self) -> dict:
        """JSON-ready representation with ISO-formatted timestamps."""
        return _jsonable(asdict(self))


def _platform_id() -> str:
    try:
        return platform.freedesktop_os_release().get("ID", "")
    except OSError:
        return platform.system().lower()


def system_info() -> SystemInfo:
    boot = psutil.boot_time()
    return SystemInfo(
        hostname=socket.gethostname(),
        platform=_platform_id(),
        os=platform.system().lower(),
        kernel_arch=platform.machine(),
        kernel_version=platform.release(),
        python_version=platform.python_version(),
        num_cpu=os.cpu_count() or 0,
        uptime=max(int(time.time() - boot), 0),
        boot_time=datetime.fromtimestamp(boot, timezone.utc),
    )


def resource_usage() -> ResourceUsage:
    """Sample host and process resource usage; CPU is measured over one second."""
    usage = ResourceUsage(active_threads=threading.active_count())

    try:
        usage.cpu_usage = float(psutil.cpu_percent(interval=CPU_SAMPLE_SECONDS))
    except (OSError, psutil.Error):
        pass

    try:
        usage.cpu_load = list(psutil.getloadavg())
    except (OSError, AttributeError):
        pass

    try:
        memory = psutil.virtual_memory()
        usage.memory_usage = memory.percent
        usage.memory_total = memory.total
        usage.memory_free = memory.free
        usage.memory_used = memory.used
    except (OSError, psutil.Error):
        pass

    try:
        swap = psutil.swap_memory()
        usage.swap_usage = swap.percent
        usage.swap_total = swap.total
    except (OSError, psutil.Error):
        pass

    try:
        disk = psutil.disk_usage(os.path.abspath(os.sep))
        usage.disk_usage = disk.percent
        usage.disk_total = disk.total
        usage.disk_free = disk.free
    except (OSError, psutil.Error):
        pass

    try:
        usage.threads = psutil.Process(os.getpid()).num_threads()
    except psutil.Error:
        pass

    usage.gc_pause = _GC_TRACKER.last_pause_ms
    usage.gc_runs = sum(stat["collections"] for stat in gc.get_stats())
    return usage


def _open_descriptors(process: psutil.Process) -> int:
    try:
        return process.num_fds()
    except AttributeError:
        return process.num_handles()


def application_info(version: str, environment: str = "debug") -> ApplicationInfo:
    elapsed = time.perf_counter() - _START_PERF
    info = ApplicationInfo(
        version=version,
        start_time=_START_TIME,
        environment=environment,
        pid=os.getpid(),
        last_gc=_GC_TRACKER.last_finished,
        next_gc=max(gc.get_threshold()[0] - gc.get_count()[0], 0),
        gc_cpu_fraction=_GC_TRACKER.total_seconds / elapsed if elapsed > 0 else 0.0,
    )
    try:
        process = psutil.Process(info.pid)
        info.memory_used = process.memory_info().rss
        info.num_fd = _open_descriptors(process)
        info.cpu_percent = process.cpu_percent()
    except (psutil.Error, AttributeError):
        pass
    return info


def check_dependencies(checks: Mapping[str, Callable[[], Any]]) -> dict:
    """Run each check; a check fails by raising. Returns name -> status text."""
    results = {}
    for name, check in checks.items():
        try:
            check()
        except Exception as exc:
            results[name] = DEPENDENCY_UNAVAILABLE + str(exc)
        else:
            results[name] = DEPENDENCY_OK
    return results


def is_healthy(status: HealthStatus, thresholds: Optional[Thresholds] = None) -> bool:
    limits = thresholds or Thresholds()
    res = status.resources
    if res.cpu_usage > limits.cpu_usage:
        return False
    if res.memory_usage > limits.memory_usage:
        return False
    if res.disk_usage > limits.disk_usage:
        return False
    if res.active_threads > limits.active_threads:
        return False
    if res.gc_pause > limits.gc_pause:
        return False
    return all(state == DEPENDENCY_OK for state in status.dependencies.values())


def health_report(
    version: str,
    checks: Optional[Mapping[str, Callable[[], Any]]] = None,
    environment: str = "debug",
) -> tuple[HTTPStatus, HealthStatus]:
    """Build a full report and the HTTP status that goes with it."""
    status = HealthStatus(dependencies=check_dependencies(checks or {}))
    status.system = system_info()
    status.resources = resource_usage()
    status.application = application_info(version, environment)
    if not is_healthy(status):
        status.status = STATUS_DOWN
        return HTTPStatus.SERVICE_UNAVAILABLE, status
    return HTTPStatus.OK, status


__all__ = [
    "ApplicationInfo",
    "HealthStatus",
    "ResourceUsage",
    "SystemInfo",
    "Thresholds",
    "application_info",
    "check_dependencies",
    "health_report",
    "is_healthy",
    "resource_usage",
    "system_info",
]