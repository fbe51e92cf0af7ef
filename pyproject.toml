[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tvchartkit"
version = "0.1.0"
description = "Helpers for TradingView Desktop charts: Pine Script analysis and backups, panes, tabs, replay, drawings and compact market context"
requires-python = ">=3.10"
dependencies = []
keywords = ["tradingview", "pine-script", "charting", "trading", "static-analysis", "replay"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tvchartkit"]

[tool.hatch.build.targets.sdist]
include = ["tvchartkit", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
