[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "aulastudio"
version = "1.0.0"
description = "Seat booking, check-in, waiting list and daily reports for a study room"
requires-python = ">=3.10"
dependencies = []
keywords = ["booking", "study room", "waiting list", "check-in", "scheduling"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Natural Language :: Italian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
aulastudio = "aulastudio.sistema:main"

[tool.hatch.build.targets.wheel]
packages = ["aulastudio"]

[tool.pytest.ini_options]
addopts = "-ra"
