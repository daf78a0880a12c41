[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tnac"
version = "0.1.0"
description = "Runtime support for the tnac calculator language: source tracking, an interactive shell, and text printers for syntax trees, IR and symbols"
requires-python = ">=3.10"
dependencies = []
keywords = ["calculator", "interpreter", "repl", "ast", "ir", "diagnostics"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tnac"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
