[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "civtracker"
version = "0.1.0"
description = "Track technologies and cities of players in a shared turn-based strategy game session"
requires-python = ">=3.10"
keywords = ["civilization", "strategy", "game", "tracker", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: Turn Based Strategy",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["civtracker"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
