[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agentcom"
version = "0.1.0"
description = "Coordination building blocks for local agents: tasks, messages, Unix socket transport, onboarding and an MCP JSON-RPC server"
requires-python = ">=3.10"
dependencies = []
keywords = ["agents", "messaging", "tasks", "mcp", "json-rpc", "unix-socket"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["agentcom"]

[tool.pytest.ini_options]
addopts = "-ra"
