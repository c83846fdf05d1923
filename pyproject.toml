[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sqlexec"
version = "0.1.0"
description = "SQL statement syntax trees and query plan executors over a transactional row store"
requires-python = ">=3.10"
dependencies = []
keywords = ["sql", "database", "query", "executor", "join", "aggregation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sqlexec"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
