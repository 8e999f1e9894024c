[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "chronokit"
version = "0.1.0"
description = "Leap second tooling and PTP transparent-clock path analysis for time synchronization networks"
requires-python = ">=3.10"
dependencies = [
    "tabulate",
]
keywords = [
    "ptp",
    "leap-second",
    "tzif",
    "zoneinfo",
    "time-synchronization",
    "transparent-clock",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Time Synchronization",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["chronokit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
