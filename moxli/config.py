from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .log import get_logger

log = get_logger(__name__)

DEFAULT_SESSION_DIR = "~/.moxli"


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    return default if v is None or v == "" else v


@dataclass
class Settings:
    # Export
    pretty_json: bool = False

    # Session
    session_dir: str = DEFAULT_SESSION_DIR
    record_session: bool = True

    # Logging / UX
    log_level: str = "INFO"
    no_color: bool = False

    @property
    def session_path(self) -> Path:
        return Path(self.session_dir).expanduser()

    @staticmethod
    def from_env() -> "Settings":
        s = Settings()
        s.pretty_json = _env_bool("MOXLI_PRETTY_JSON", s.pretty_json)
        s.session_dir = _env_str("MOXLI_SESSION_DIR", s.session_dir)
        s.record_session = _env_bool("MOXLI_RECORD_SESSION", s.record_session)
        s.log_level = _env_str("MOXLI_LOG_LEVEL", s.log_level)
        s.no_color = _env_bool("MOXLI_NO_COLOR", s.no_color)
        return s

    @staticmethod
    def from_file(path: Path) -> "Settings":
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        s = Settings.from_env()
        known = {f.name for f in fields(Settings)}
        for k, v in data.items():
            if k in known:
                setattr(s, k, v)
            else:
                log.warning("Ignoring unknown config key %r in %s", k, path)
        return s


def load_settings(config_path: Optional[str]) -> Settings:
    if config_path:
        return Settings.from_file(Path(config_path))
    return Settings.from_env()
