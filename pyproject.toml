[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pqtypes"
version = "0.1.0"
description = "PostgreSQL value codecs: type OIDs, column descriptions, server errors, timestamps, bytea, hstore and a SCRAM client"
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "postgres", "oid", "sqlstate", "timestamp", "bytea", "hstore", "scram"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pqtypes"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
