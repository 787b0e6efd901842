[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "astroleaf"
version = "0.1.0"
description = "Calcium and IP3 dynamics of an astrocyte and its leaflets, integrated with a fourth-order Runge-Kutta scheme"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "astrocyte",
    "leaflet",
    "calcium",
    "IP3",
    "noradrenaline",
    "runge-kutta",
    "computational neuroscience",
    "simulation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
astroleaf-noradrenaline = "astroleaf.noradrenaline.simulation:main"
astroleaf-experiment = "astroleaf.experiment.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["astroleaf"]

[tool.pytest.ini_options]
addopts = "-ra"
