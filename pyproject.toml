[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "opsmonitor"
version = "0.0.1"
description = "Storage, query and health-reporting core for a multi-tenant alerting and monitoring service"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["monitoring", "alerting", "on-call", "duty", "health-check", "multi-tenant"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["opsmonitor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
