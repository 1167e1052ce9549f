[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netsim"
version = "0.1.0"
description = "Discrete-time simulation of a production network of loading ramps, workers and storehouses"
requires-python = ">=3.10"
dependencies = []
keywords = ["simulation", "production", "network", "discrete-time", "factory"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["netsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
