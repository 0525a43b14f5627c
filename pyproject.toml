[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "m7support"
version = "0.1.0"
description = "Location-engine support utilities: list and message queue, configuration parsing, filtered logging, NMEA sentence generation, network-initiated request handling and a PN544 NFC controller profile."
requires-python = ">=3.10"
dependencies = []
keywords = ["gps", "nmea", "location", "message-queue", "configuration", "nfc", "embedded"]
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
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["m7support"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
