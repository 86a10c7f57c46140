[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fzfind"
version = "0.43.0"
description = "Fuzzy matching, scoring, ANSI color extraction and result merging for interactive finders"
requires-python = ">=3.10"
dependencies = []
keywords = ["fuzzy", "finder", "matching", "search", "ansi"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
    "Topic :: Text Processing :: General",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fzfind"]

[tool.pytest.ini_options]
addopts = "-ra"
