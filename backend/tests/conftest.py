import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def reset_default_resolver(monkeypatch):
    """Keep the app-wide resolver (and its cache) from leaking between tests."""
    from services import location_resolver

    monkeypatch.setattr(location_resolver, "_default_resolver", None)
