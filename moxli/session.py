from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

import yaml
from pydantic import BaseModel, Field, ValidationError

from .log import get_logger

log = get_logger(__name__)

SESSION_FILE = "session.yaml"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MergeRecord(BaseModel):
    base_file: str
    source_files: List[str] = Field(default_factory=list)
    date: datetime = Field(default_factory=_now)
    enhanced: int = 0


class Session(BaseModel):
    working_dir: str = ""
    current_file: str = ""
    last_modified: Optional[datetime] = None
    merge_history: List[MergeRecord] = Field(default_factory=list)

    def add_merge_record(self, base_file: str, source_files: Sequence[str], enhanced: int) -> MergeRecord:
        rec = MergeRecord(base_file=base_file, source_files=list(source_files), enhanced=enhanced)
        self.merge_history.append(rec)
        return rec


class SessionManager:
    """Reads and writes ``session.yaml`` under a config directory (default ~/.moxli)."""

    def __init__(self, config_dir: Path) -> None:
        self.config_dir = Path(config_dir).expanduser()

    @property
    def path(self) -> Path:
        return self.config_dir / SESSION_FILE

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[Session]:
        if not self.exists():
            return None
        try:
            data = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse session file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Session file {self.path} must contain a mapping")
        try:
            return Session.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid session file {self.path}: {e}") from e

    def save(self, session: Session) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        session.last_modified = _now()
        text = yaml.safe_dump(session.model_dump(mode="json"), sort_keys=False, allow_unicode=True)
        self.path.write_text(text, encoding="utf-8")
        log.debug("Saved session: %s", self.path)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        log.info("Cleared session: %s", self.path)
