[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ocstack"
version = "0.1.0"
description = "Interactive chat prompt for local models that runs OpenStack-on-OpenShift tools through function calls"
requires-python = ">=3.10"
keywords = ["llm", "ollama", "llama", "openstack", "openshift", "agent", "tools", "function-calling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "requests",
    "jinja2",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
ocstack = "ocstack.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["ocstack"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
