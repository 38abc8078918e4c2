"""Shared test fixtures for specdoc.

Provides reusable fixtures for loading API description fixtures, building
specifications from them, creating isolated config environments, managing
output state, and running CLI commands. These fixtures are automatically
discovered by pytest and available to all test modules without explicit
imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from specdoc.models import Specification
from specdoc.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output and logging state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager and the ``specdoc`` log handler.

    Both hold references to the sys.stdout/sys.stderr in place when they
    were created. Typer's CliRunner swaps those streams for the duration
    of an invocation, so anything left behind would write to a closed
    file in the next test.
    """
    yield
    reset_output()
    logger = logging.getLogger("specdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Raw document fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger2_raw() -> dict[str, Any]:
    """Load the raw Swagger 2.0 petstore document."""
    with open(FIXTURES_DIR / "petstore_swagger2.json") as f:
        return json.load(f)


@pytest.fixture
def openapi3_raw() -> dict[str, Any]:
    """Load the raw OpenAPI 3.0 petstore document."""
    with open(FIXTURES_DIR / "petstore_openapi3.json") as f:
        return json.load(f)


# ---------------------------------------------------------------------------
# Built specification fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def swagger2_spec(swagger2_raw: dict[str, Any]) -> Specification:
    """Normalized Swagger 2.0 petstore."""
    from specdoc.normalizer import SpecificationBuilder
    from specdoc.parser import project_document

    return SpecificationBuilder(project_document(swagger2_raw)).build()


@pytest.fixture
def openapi3_spec(openapi3_raw: dict[str, Any]) -> Specification:
    """Normalized OpenAPI 3.0 petstore."""
    from specdoc.normalizer import SpecificationBuilder
    from specdoc.parser import project_document

    return SpecificationBuilder(project_document(openapi3_raw)).build()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    so that tests never touch real user config, clears the SPECDOC_*
    environment variables, and changes the working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    for var in ["SPECDOC_SPECS", "SPECDOC_COLLAPSE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
