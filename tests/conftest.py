"""Pytest configuration and fixtures for compilerguard tests."""
from pathlib import Path

import pytest

from compilerguard.config import STRICT_ENV_VAR


@pytest.fixture(autouse=True)
def _clear_strict_override(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the strictness environment override out of tests unless set explicitly."""
    monkeypatch.delenv(STRICT_ENV_VAR, raising=False)


def pytest_sessionfinish(session, exitstatus):
    """Check that coverage data was collected if --cov was requested.

    This prevents silent "no data collected" scenarios that produce 0% coverage
    without failing the test run.
    """
    cov_enabled = any("--cov" in str(arg) for arg in session.config.args)

    if not cov_enabled:
        return

    cwd = Path.cwd()
    coverage_files = list(cwd.glob(".coverage*"))

    if not coverage_files:
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'compilerguard' (the package) not 'src/compilerguard' (filesystem path).",
            returncode=1
        )
