[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nxfuzz"
version = "0.1.0"
description = "Building blocks for a system call and file fuzzer: argument generators, a syscall table, ELF entry points and run configuration."
requires-python = ">=3.10"
dependencies = []
keywords = ["fuzzing", "fuzzer", "syscall", "testing", "elf"]
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
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nxfuzz"]

[tool.hatch.build.targets.sdist]
include = ["nxfuzz", "tests", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
