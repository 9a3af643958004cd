[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "svtarray"
version = "0.1.0"
description = "Sparse multidimensional arrays stored as sparse vector trees, with arithmetic, binding, permutation, dimension tuning and subassignment"
requires-python = ">=3.10"
dependencies = []
keywords = ["sparse", "array", "tensor", "matrix", "aperm", "abind", "transpose"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["svtarray"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
