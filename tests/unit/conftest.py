"""
Pytest configuration and fixtures for satisfiability tests.
"""
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from satisfiability.expr.registry import default_registry, reset_registry  # noqa: E402
from satisfiability.solver import SolverOptions  # noqa: E402

FAKE_SOLVER = Path(__file__).parent / "fake_solver.py"


@pytest.fixture(autouse=True)
def clean_registry():
    """Each test starts with an empty, non-fatal, warning registry."""
    reg = default_registry()
    reg.warn_duplicates, reg.fatal = True, False
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def fake_options():
    """Build SolverOptions launching the scripted fake solver."""
    def make(*answers, timeout_s=5.0):
        return SolverOptions(
            command=[sys.executable, str(FAKE_SOLVER), ",".join(answers)],
            timeout_s=timeout_s,
        )
    return make
