[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "shttps"
version = "0.1.0"
description = "Helpers for HTTP server scripts: file system access, JSON table conversion, typed configuration and a small HTTP client"
requires-python = ">=3.11"
dependencies = []
keywords = ["http", "server", "scripting", "configuration", "json", "filesystem"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["shttps"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"
