[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tacd"
version = "0.1.0"
description = "Core logic of a test automation controller daemon: update channels, RAUC slot status, network link state, systemd service types and simulated digital I/O lines"
requires-python = ">=3.10"
keywords = ["rauc", "update", "systemd", "networkmanager", "gpio", "embedded"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tacd"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
