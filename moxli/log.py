from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"
    no_color: bool = False


def setup_logging(cfg: LogConfig) -> None:
    """Install a single root handler; rich on a colour terminal, plain otherwise.

    Parser warnings (bs4 emits them through ``warnings``) are routed into
    logging so a batch scan reports them next to the file being read.
    """
    level = getattr(logging, cfg.level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = _build_handler(use_color=_wants_color(cfg))
    handler.setLevel(level)
    root.addHandler(handler)
    logging.captureWarnings(True)


def _wants_color(cfg: LogConfig) -> bool:
    if cfg.no_color or os.getenv("NO_COLOR") is not None:
        return False
    return sys.stderr.isatty()


def _build_handler(*, use_color: bool) -> logging.Handler:
    if use_color:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_level=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
