[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "signalr-hub"
version = "0.1.0"
description = "Client-side SignalR hub logic: values, JSON hub protocol, handshake, invocation callbacks and a transport-agnostic hub connection."
requires-python = ">=3.10"
dependencies = []
keywords = ["signalr", "hub", "websocket", "rpc", "json"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["signalr_hub"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
