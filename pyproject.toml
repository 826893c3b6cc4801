[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aucluster"
version = "0.1.0"
description = "Event-camera clustering into attention units with FIFO and activity-map trackers"
requires-python = ">=3.10"
dependencies = []
keywords = ["event camera", "clustering", "tracking", "activity map", "attention unit"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aucluster = "aucluster.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["aucluster"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
