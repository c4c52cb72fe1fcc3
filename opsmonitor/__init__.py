"""Storage, query and health-reporting core for a multi-tenant alerting service."""

__version__ = "0.0.1"