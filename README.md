# opsmonitor

The storage, query and health-reporting core of a multi-tenant alerting
service: alert rules and rule groups, data sources, dashboards, notice targets
and their delivery records, notice and rule templates, on-call duty rosters,
silences, subscriptions, roles, tenants and users, plus a health report for
the host the service runs on.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Storage

Every repository sits on one `opsmonitor.store.Store`: named tables of JSON
records kept in an SQLite database (a file path, or `":memory:"` by default).
Each write runs in its own transaction and is rolled back on failure.
Records are plain dicts. `Store` can be used as a context manager and closes
itself on exit.

Failures raise `StoreError`. Lookups that need exactly one record raise
`NotFoundError` (a subclass of `StoreError` and `LookupError`) when nothing
matches; lookups documented as optional return `None` instead.

```python
from opsmonitor.store import Store, Page
from opsmonitor.rules import RuleGroupRepo

with Store(":memory:") as store:
    groups = RuleGroupRepo(store)
    groups.create({"tenant_id": "default", "name": "infra", "description": "hosts"})

    items, page = groups.list("default", Page(index=1, size=10), "")
    print(page.total, items[0]["id"], items[0]["number"])
```

Paged listings return a pair: the records of the requested page and a `Page`
with `index`, `size` and `total` filled in.

The repositories are:

| Module | Classes |
| --- | --- |
| `opsmonitor.audit_log` | `AuditLogRepo` |
| `opsmonitor.dashboards` | `DashboardRepo` (dashboards and folders) |
| `opsmonitor.datasources` | `DatasourceRepo` |
| `opsmonitor.duty` | `DutyRepo`, `DutyCalendarRepo` |
| `opsmonitor.events` | `EventRepo` (history of resolved alerts) |
| `opsmonitor.notices` | `NoticeRepo`, `NoticeTemplateRepo` |
| `opsmonitor.probing` | `ProbingRepo` |
| `opsmonitor.rules` | `RuleRepo`, `RuleGroupRepo` |
| `opsmonitor.templates` | `RuleTemplateRepo`, `RuleTemplateGroupRepo` |
| `opsmonitor.settings` | `SettingsRepo` |
| `opsmonitor.silences` | `SilenceRepo` |
| `opsmonitor.subscriptions` | `SubscribeRepo`, `SubscribeService` |
| `opsmonitor.roles` | `UserRoleRepo`, `UserPermissionsRepo` |
| `opsmonitor.accounts` | `UserRepo`, `TenantRepo` |

Some rules the repositories enforce:

- Deleting something still in use raises `StoreError`: a data source bound to
  alert rules, a duty roster bound to a notice target, a notice target bound
  to alert rules, or a rule group that still holds rules.
- `RuleGroupRepo.create` refuses a group name already in use and assigns an
  `rg-` id; `DutyRepo.create` assigns a `dt-` id and creation time;
  `NoticeTemplateRepo.create` assigns an `nt-` id.
- `DutyRepo`, `NoticeRepo` and `RuleRepo` have `has_quota`, which compares a
  tenant's record count with the quota stored on the tenant.
- `SubscribeService.create` assigns an `as-` id and raises
  `AlreadySubscribedError` when the user already follows the rule.
- `TenantRepo.create` links the `admin` user and the tenant's creator to the
  new tenant with the `admin` role; `UserRepo.create` adds the `admin` user to
  the `default` tenant. `UserRepo.delete` and `TenantRepo.delete` unlink users
  from tenants before deleting.

## Duty rosters

`opsmonitor.duty_calendar.build_schedule` lays out an on-call roster from a
starting month (`"2024-05"`) to the end of that year, with every month laid
out as days 1 to 31 in the unpadded `Y-M-D` form. With `"day"` each user takes
`duty_period` days in turn; with `"week"` a user hands over after
`duty_period` Sundays. `parse_month` raises `ValueError` on a malformed month.

`DutyCalendarService.create_and_update` builds the roster and writes it
through a `DutyCalendarRepo`, updating days already on the calendar and
inserting the rest; it returns the full roster.

## Current alerts

`opsmonitor.current_events.list_current_events` takes firing alerts (dicts or
their cached JSON text), filters them by data source type, severity, age in
days and a case-sensitive text query, and returns one page of them with a
`Page` holding the total. `filter_current_events` and `page_slice` are
available on their own.

## Notice metrics

`opsmonitor.notice_metrics.record_metric(notices, tenant_id, today)` counts a
tenant's notice records per day for the last seven days, split by severity P0,
P1 and P2. `RecordMetric.to_dict()` gives
`{"date": [...], "series": {"p0": [...], "p1": [...], "p2": [...]}}`.

## Health

```python
from opsmonitor.health import health_report

def database_check():
    pass  # raise when the database is unreachable

code, status = health_report("v0.0.1", {"database": database_check}, "release")
print(code)                 # HTTPStatus.OK or HTTPStatus.SERVICE_UNAVAILABLE
print(status.status)        # "UP" or "DOWN"
print(status.to_dict())
```

A check is a callable that raises when its dependency is unavailable. The
report is `DOWN` when CPU, memory or disk usage, the number of active threads
or the last garbage-collection pause crosses its limit in `Thresholds`, or
when any check fails. CPU usage is sampled over one second, so a report takes
about that long. `system_info`, `resource_usage`, `application_info`,
`check_dependencies` and `is_healthy` can be called separately.

## Elasticsearch and Kubernetes helpers

`opsmonitor.es.ESQueryResponse` reads a search hit (`{"_source": {...}}`) and
gives its metric labels (`Topic`, `Index`), an MD5 fingerprint of those labels
and the hit as indented JSON for annotations. `opsmonitor.kube_events`
lists the Kubernetes resource types (`EVENT_RESOURCE_TYPES`) and, through
`reasons_for`, the event reasons watched for Pods, Nodes, PVC/PV and HPA.

## What this package does not do

It is a library, not a running service. It has no command-line entry point,
no HTTP server or API routes, and no authentication. It does not evaluate
alert rules, run endpoint probes, query Prometheus, Elasticsearch or other
data sources, send notifications, or keep a cache of firing alerts; current
alerts and health checks are handed to it by the caller. Storage is limited
to the SQLite-backed `Store`.