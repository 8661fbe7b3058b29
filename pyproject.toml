[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sockclient"
version = "0.1.0"
description = "A TCP client socket with optional TLS, driven by a small state machine"
requires-python = ">=3.10"
dependencies = []
keywords = ["socket", "tcp", "tls", "client", "state-machine"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
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

[project.scripts]
sockclient = "sockclient.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sockclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
