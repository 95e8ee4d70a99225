[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rubble"
version = "0.1.0"
description = "Bluetooth Low Energy link-layer building blocks: channels, data PDUs, LLCP, UUIDs, SMP command decoding and packet queues"
requires-python = ">=3.10"
dependencies = []
keywords = ["bluetooth", "ble", "link-layer", "llcp", "smp", "protocol"]
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
    "Topic :: Communications",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rubble"]

[tool.pytest.ini_options]
addopts = "-ra"
