[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "consequencekit"
version = "0.1.0"
description = "Flood consequence modelling: structure damage, foundation height uncertainty, warning response, building stability and life loss."
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = [
    "flood",
    "consequences",
    "damage",
    "hydrology",
    "life loss",
    "depth-damage",
    "risk",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Hydrology",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["consequencekit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
