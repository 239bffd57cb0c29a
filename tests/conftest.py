import sys
from pathlib import Path

import pytest

# Allow `import moxli` without installing the package.
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture(autouse=True)
def _isolated_session_dir(tmp_path, monkeypatch):
    """Tests must never write to the real ~/.moxli."""
    monkeypatch.setenv("MOXLI_SESSION_DIR", str(tmp_path / "moxli-home"))
    monkeypatch.delenv("MOXLI_PRETTY_JSON", raising=False)
    monkeypatch.delenv("MOXLI_RECORD_SESSION", raising=False)
