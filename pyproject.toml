[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "orvalidation"
version = "0.5.0"
description = "Input validation and token estimation for chat, completion and web search requests to an LLM routing API"
requires-python = ">=3.10"
dependencies = []
keywords = ["validation", "llm", "chat", "completion", "web-search", "tokens"]
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
packages = ["orvalidation"]

[tool.pytest.ini_options]
addopts = "-ra"
