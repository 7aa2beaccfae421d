[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tr7rt"
version = "0.1.0"
description = "Game runtime pieces: tracing, queued file systems, ADPCM decoding, scenes and game data layouts"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "runtime", "adpcm", "filesystem", "trace", "engine"]
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
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tr7rt"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
