[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "deeplkit"
version = "0.1.0"
description = "Client library and command building blocks for the DeepL translation API"
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["deepl", "translation", "glossary", "api-client"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Linguistic",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["deeplkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
