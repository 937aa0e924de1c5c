import sys
from pathlib import Path

import pytest

# Ensure the backend package root is on sys.path for direct pytest runs
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def _no_upstream_throttle(monkeypatch):
    """Disable the Nominatim rate limit so mocked requests don't sleep."""
    from settings import settings

    monkeypatch.setattr(settings, "NOMINATIM_MIN_INTERVAL", 0.0)
