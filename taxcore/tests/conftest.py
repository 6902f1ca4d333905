"""
Test configuration for taxcore tests.

sys.path is configured so 'from taxcore...' resolves whether or not the
package was installed with `pip install -e .`, and whether pytest is run from
the project root or from taxcore/.
"""
import sys
from pathlib import Path

import pytest

_project_root = Path(__file__).parent.parent.parent    # .../<repo>/

if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


@pytest.fixture
def fallback_enabled(monkeypatch):
    """Turn on settings.fallback_to_latest_year for one test."""
    from taxcore.config import settings
    monkeypatch.setattr(settings, "fallback_to_latest_year", True)
    return settings
