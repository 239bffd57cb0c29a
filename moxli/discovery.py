from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from .detect import Dialect, UnknownFormatError, detect_format
from .log import get_logger

log = get_logger(__name__)

SCAN_EXTENSIONS = (".json", ".html")


@dataclass
class DiscoveredFile:
    path: Path
    format: Dialect
    selected: bool = False
    is_base: bool = False


def detect_file_format(path: Path) -> Dialect:
    return detect_format(path.read_bytes(), name=str(path))


class FileDiscovery:
    """Collects classified bookmark files from files and directories."""

    def __init__(self) -> None:
        self.files: List[DiscoveredFile] = []

    def discover_path(self, path: Union[str, Path]) -> List[DiscoveredFile]:
        p = Path(path).expanduser()
        if not p.exists():
            raise FileNotFoundError(f"Path not found: {p}")
        if p.is_dir():
            return self._scan_directory(p)
        return [self._add_file(p)]

    def clear(self) -> None:
        self.files = []

    def _scan_directory(self, dir_path: Path) -> List[DiscoveredFile]:
        found: List[DiscoveredFile] = []
        skipped = 0
        for entry in sorted(dir_path.iterdir()):
            if not entry.is_file() or entry.suffix.lower() not in SCAN_EXTENSIONS:
                continue
            try:
                found.append(self._add_file(entry))
            except UnknownFormatError:
                log.info("Skipping %s: not a recognized bookmark export.", entry)
                skipped += 1
            except OSError as e:
                log.warning("Skipping %s: %s", entry, e)
                skipped += 1
        log.info("Discovered %d bookmark files in %s (%d skipped).", len(found), dir_path, skipped)
        return found

    def _add_file(self, path: Path) -> DiscoveredFile:
        fmt = detect_file_format(path)
        if fmt is Dialect.UNKNOWN:
            raise UnknownFormatError(f"Unrecognized bookmark format: {path}")
        df = DiscoveredFile(path=path, format=fmt)
        self.files.append(df)
        return df
