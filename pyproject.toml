[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "boblight"
version = "0.1.0"
description = "Building blocks for ambient light software: color processing, message queues, timers, TCP and serial I/O"
requires-python = ">=3.10"
dependencies = []
keywords = ["ambilight", "ambient light", "led", "video", "lighting", "serial", "tcp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video :: Display",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["boblight"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
