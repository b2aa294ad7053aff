[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wimedit"
version = "0.1.0"
description = "Readers and viewers for War in Middle Earth resource files"
requires-python = ">=3.10"
dependencies = []
keywords = ["war in middle earth", "game data", "resource files", "tiles", "maps", "retro"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wimedit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
