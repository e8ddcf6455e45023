[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dexedfm"
version = "0.1.0"
description = "FM operator engines, algorithm layouts, envelope geometry and theme parsing for a DX7-style synthesizer"
requires-python = ">=3.10"
dependencies = []
keywords = ["fm", "synthesis", "dx7", "opl", "audio", "envelope", "theme"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dexedfm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
