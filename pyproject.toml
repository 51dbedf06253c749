[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "sidequest"
version = "0.1.0"
description = "SQLite persistence layer and domain models for the Sidequest quest server"
requires-python = ">=3.10"
dependencies = []
keywords = ["sqlite", "persistence", "crud", "quests", "prepared statements"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sidequest-server = "sidequest.server:main"

[tool.setuptools]
packages = ["sidequest"]

[tool.pytest.ini_options]
addopts = "-ra"
