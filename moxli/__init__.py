"""moxli: bookmark importer with format detection and base-centric timestamp merge."""

from pathlib import Path


def _read_version() -> str:
    p = Path(__file__).resolve().parents[1] / "VERSION"
    try:
        return p.read_text(encoding="utf-8").strip()
    except OSError:
        # Installed without the source tree next to it.
        return "0.3.0"


__version__ = _read_version()
