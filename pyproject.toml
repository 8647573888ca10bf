[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "asmlink"
version = "0.1.0"
description = "A two-pass assembler, linker and virtual machine for a small register-based instruction set"
requires-python = ">=3.10"
dependencies = []
keywords = ["assembler", "linker", "virtual machine", "education", "toy cpu"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Assemblers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
asmlink = "asmlink.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["asmlink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
