"""Shared test fixtures for pretty-stack."""

import shutil
from pathlib import Path
from types import SimpleNamespace

import pytest

from pretty_stack.utils.logging import configure_logging

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
SOURCES_DIR = FIXTURES_DIR / "sources"
TRACES_DIR = FIXTURES_DIR / "traces"


@pytest.fixture(autouse=True, scope="session")
def quiet_logging() -> None:
    """Route library logs through stdlib at WARNING so stdout stays clean."""
    configure_logging(level="WARNING", log_format="console")


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def node_crash_text() -> str:
    """Load Node's stderr output for an uncaught error."""
    return (TRACES_DIR / "node_crash.txt").read_text()


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Copy the sample sources into a temp dir and make it the cwd."""
    shutil.copy(SOURCES_DIR / "app.js", tmp_path / "app.js")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def app_error(project_dir: Path) -> SimpleNamespace:
    """Error thrown from loadUser in app.js, with a full stack."""
    app = project_dir / "app.js"
    return SimpleNamespace(
        name="Error",
        message="user not found",
        stack=(
            "Error: user not found\n"
            f"    at loadUser ({app}:3:11)\n"
            f"    at Object.<anonymous> ({app}:9:1)\n"
            "    at Module._compile (node:internal/modules/cjs/loader:1364:14)\n"
            "    at node:internal/main/run_main_module:28:49"
        ),
    )

