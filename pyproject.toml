[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dizkaz"
version = "0.1.0"
description = "Template helpers, verification codes, UI settings, list caching and PostgreSQL stores for a discussion board"
requires-python = ">=3.10"
dependencies = [
    "bcrypt",
]
keywords = ["forum", "discussion", "message board", "bbs", "postgresql"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Message Boards",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["dizkaz"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
