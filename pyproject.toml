[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "reportsheet"
version = "0.1.0"
description = "Write production tracking reports as XLSX workbooks with a small pure-Python worksheet model."
requires-python = ">=3.10"
dependencies = []
keywords = ["xlsx", "spreadsheet", "excel", "report", "ooxml"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Manufacturing",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
    "Topic :: Office/Business :: Financial :: Spreadsheet",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
reportsheet = "reportsheet.report:main"

[tool.hatch.build.targets.wheel]
packages = ["reportsheet"]

[tool.pytest.ini_options]
addopts = "-ra"
