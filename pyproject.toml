[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nxtarm"
version = "0.2.0"
description = "Inverse kinematics, reachability checks, servo messages and simulated motion control for a three-joint robotic arm, with whitespace-separated token file I/O"
requires-python = ">=3.10"
dependencies = []
keywords = ["robotics", "robot arm", "inverse kinematics", "servo", "motion control", "i2c"]
classifiers = [
    "Development Status :: 3 - Alpha",
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

[project.scripts]
nxtarm = "nxtarm.runner:main"

[tool.hatch.build.targets.wheel]
packages = ["nxtarm"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
