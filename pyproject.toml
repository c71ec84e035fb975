[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lendingdesk"
version = "0.1.0"
description = "Library lending domain: holds, checkouts, overdue tracking, command and query handlers, jobs and catalogue event handling"
requires-python = ">=3.10"
dependencies = []
keywords = ["library", "lending", "holds", "checkout", "cqrs", "domain-driven-design"]
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
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lendingdesk"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
