[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "piscine"
version = "0.1.0"
description = "Small command-line utilities, algorithms and services: statistics, recipe and snapshot diffs, find/wc/xargs/rotate, a candy shop, a places search app and more."
requires-python = ">=3.10"
keywords = [
    "utilities",
    "cli",
    "statistics",
    "knapsack",
    "coins",
    "recipes",
    "wc",
    "find",
    "xargs",
    "log-rotation",
    "elasticsearch",
    "jwt",
    "anomaly-detection",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]
dependencies = [
    "requests",
    "pyjwt",
    "jinja2",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
piscine-stats = "piscine.stats:main"
piscine-readdb = "piscine.recipes:convert_main"
piscine-comparedb = "piscine.recipes:compare_main"
piscine-comparefs = "piscine.snapshots:main"
piscine-find = "piscine.find:main"
piscine-wc = "piscine.wc:main"
piscine-rotate = "piscine.rotate:main"
piscine-xargs = "piscine.xargs:main"
piscine-cow = "piscine.cow:main"
piscine-candy-server = "piscine.candy_server:main"
piscine-candy-client = "piscine.candy_client:main"
piscine-places-load = "piscine.places_store:main"
piscine-places = "piscine.places_app:main"
piscine-sleepsort = "piscine.channels:main"
piscine-crawl = "piscine.crawler:main"
piscine-anomalies = "piscine.anomalies:main"
piscine-logo = "piscine.logo:main"

[tool.hatch.build.targets.wheel]
packages = ["piscine"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
