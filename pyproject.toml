[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pdclient"
version = "0.1.0"
description = "DHCPv6 prefix delegation building blocks: protocol constants, configuration, packet parsing and building, downstream addresses"
requires-python = ">=3.10"
dependencies = []
keywords = ["dhcpv6", "ipv6", "prefix-delegation", "ia_pd", "networking"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pdclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
