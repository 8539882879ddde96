[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fiberweb"
version = "0.1.0"
description = "HTTP message models, servlet routing, byte streams and a cooperative fiber scheduler"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "servlet", "routing", "fiber", "coroutine", "scheduler"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fiberweb"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
