[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "oaiclient"
version = "0.1.0"
description = "A small client for OpenAI-compatible chat, streaming, assistants, audio and batch APIs"
requires-python = ">=3.10"
dependencies = []
keywords = ["openai", "chat", "completions", "api", "client", "streaming", "assistants", "batch"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["oaiclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
