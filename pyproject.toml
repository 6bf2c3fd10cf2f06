[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "huhobot"
version = "0.1.0"
description = "A small WebSocket client with a frame codec, plus a streaming JSON lexer"
requires-python = ">=3.10"
dependencies = []
keywords = ["websocket", "client", "frames", "json", "lexer", "tokenizer"]
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
    "Topic :: Internet",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["huhobot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
