[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "springkit"
version = "0.1.0"
description = "Tree-checked configuration storage, configuration file readers, validation expressions and application lifecycle primitives"
requires-python = ">=3.11"
dependencies = [
    "pyyaml",
]
keywords = [
    "configuration",
    "properties",
    "validation",
    "dependency-injection",
    "yaml",
    "toml",
    "application-framework",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["springkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
