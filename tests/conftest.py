"""
Pytest configuration: make sure `import chronograph` works regardless of
where pytest is invoked, and provide shared fixtures.
"""

import sys
from pathlib import Path

import pytest
from sqlmodel import Session

# /path/to/project/tests -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from chronograph.db import create_all, make_engine  # noqa: E402
from chronograph.graph import PropertyGraph  # noqa: E402


@pytest.fixture
def graph():
    return PropertyGraph()


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with the schema created."""
    eng = make_engine("sqlite://")
    create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as s:
        yield s
