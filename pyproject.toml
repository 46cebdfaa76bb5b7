[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lucatools"
version = "2.0.3"
description = "Tools for LucaSystem engine assets: CZ images and bitmap fonts"
requires-python = ">=3.10"
keywords = ["lucasystem", "cz", "cz0", "cz1", "cz2", "cz3", "lzw", "font", "visual novel"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
lucatools = "lucatools.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lucatools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
