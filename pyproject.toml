[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sensorhub"
version = "0.1.0"
description = "Generate sensor readings, ingest them into MySQL and serve the stored records over small Flask HTTP APIs."
requires-python = ">=3.10"
dependencies = [
    "flask",
]
keywords = ["sensor", "telemetry", "iot", "http", "api", "flask", "mysql"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Framework :: Flask",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sensorhub"]

[tool.hatch.build.targets.sdist]
include = [
    "sensorhub",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
