[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spacelink"
version = "0.1.0"
description = "Core building blocks of a small-satellite packet protocol: checksums, authentication, queues, buffers and connections"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = ["protocol", "packet", "satellite", "crc32", "hmac", "sha1", "queue", "networking"]
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
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["spacelink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
