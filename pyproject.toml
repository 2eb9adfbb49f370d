[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cukewire"
version = "0.1.0"
description = "Step definitions, hooks and a Cucumber wire protocol server"
requires-python = ">=3.10"
dependencies = []
keywords = ["cucumber", "bdd", "wire protocol", "gherkin", "step definitions", "testing"]
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
    "Topic :: Software Development :: Testing :: BDD",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cukewire"]

[tool.pytest.ini_options]
addopts = "-ra"
