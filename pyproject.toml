[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lspbridge"
version = "0.1.0"
description = "HTTP bridge that forwards hover and completion requests to a Pyright language server"
requires-python = ">=3.10"
dependencies = []
keywords = ["lsp", "language-server", "pyright", "json-rpc", "proxy"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: POSIX",
    "Topic :: Software Development",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lspbridge = "lspbridge.server:main"

[tool.hatch.build.targets.wheel]
packages = ["lspbridge"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
