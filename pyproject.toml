[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "navire-ledger"
version = "0.1.0"
description = "Contribution ledger service: records payments and expenses and serves a funding summary over HTTP."
requires-python = ">=3.10"
keywords = ["ledger", "accounting", "contributions", "payments", "expenses", "webhook"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Accounting",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "aiohttp>=3.9",
    "sqlalchemy>=2.0",
    "websockets>=12.0",
    "pydantic>=2.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
]

[project.scripts]
navire-ledger = "navire_ledger.web:main"

[tool.hatch.build.targets.wheel]
packages = ["navire_ledger"]

[tool.hatch.build.targets.sdist]
include = ["navire_ledger", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
