[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bulletca"
version = "0.1.0"
description = "Headless cellular-automata bullet playground and mob-gathering simulation in pure Python"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "cellular-automata",
    "simulation",
    "game",
    "bullet-patterns",
    "event-bus",
]
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
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bulletca"]

[tool.hatch.build.targets.sdist]
include = ["bulletca", "tests", "README.md"]

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
