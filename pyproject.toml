[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ponca"
version = "1.0.0"
description = "Point cloud analysis with NumPy: distance weighting, algebraic sphere fitting, curvature storage, MLS projection and k-nearest-neighbour graph queries."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "point cloud",
    "geometry processing",
    "sphere fitting",
    "curvature",
    "moving least squares",
    "knn graph",
    "sylvester equation",
]
classifiers = [
    "Development Status :: 4 - Beta",
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
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ponca"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
