from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from . import __version__
from .collection import Collection
from .config import Settings, load_settings
from .detect import UnknownFormatError
from .discovery import FileDiscovery
from .importer import import_file
from .log import LogConfig, get_logger, setup_logging
from .merge import merge_collections
from .session import Session, SessionManager
from .validate import validate_collection
from .writer_anybox import dumps_anybox_json, write_anybox_json

log = get_logger(__name__)


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(
        prog="moxli",
        description="Import bookmark exports and merge older timestamps into a base collection.",
    )
    p.add_argument("-V", "--version", action="version", version=f"moxli {__version__}")
    p.add_argument("--config", default=None, help="YAML config file (optional). Env vars override defaults.")
    p.add_argument("--log-level", default=None, help="DEBUG/INFO/WARN/ERROR (overrides env/config).")
    p.add_argument("--no-color", action="store_true", help="Disable colored logging.")
    sub = p.add_subparsers(dest="cmd", required=True)

    det = sub.add_parser("detect", help="Detect the export format of files or of every file in a directory.")
    det.add_argument("paths", nargs="+", help="Files or directories to scan (.json/.html).")

    mrg = sub.add_parser("merge", help="Enrich a base collection with older timestamps from sources.")
    mrg.add_argument("--base", required=True, help="Authoritative collection (any supported format).")
    mrg.add_argument("--source", action="append", default=[], help="Source export; repeat for several.")
    mrg.add_argument("--out", default=None, help="Output JSON path (default: stdout).")
    mrg.add_argument("--pretty", action="store_true", help="Indent the JSON output.")
    mrg.add_argument("--no-session", action="store_true", help="Do not record this merge in the session file.")

    val = sub.add_parser("validate", help="Import a file and check it is ready for export.")
    val.add_argument("path", help="Bookmark export to validate.")

    ses = sub.add_parser("session", help="Show or clear the saved session.")
    ses.add_argument("action", choices=["show", "clear"])

    args = p.parse_args(argv)
    try:
        cfg = load_settings(args.config)
    except (OSError, ValueError) as e:
        print(f"moxli: cannot load config: {e}", file=sys.stderr)
        return 2
    if args.log_level:
        cfg.log_level = args.log_level
    if args.no_color:
        cfg.no_color = True
    setup_logging(LogConfig(level=cfg.log_level, no_color=cfg.no_color))

    commands = {
        "detect": lambda: _cmd_detect(args),
        "merge": lambda: _cmd_merge(args, cfg),
        "validate": lambda: _cmd_validate(args),
        "session": lambda: _cmd_session(args, cfg),
    }
    return commands[args.cmd]()


def _cmd_detect(args) -> int:
    fd = FileDiscovery()
    rc = 0
    for raw in args.paths:
        try:
            fd.discover_path(raw)
        except FileNotFoundError as e:
            log.error("%s", e)
            rc = 2
        except UnknownFormatError as e:
            log.warning("%s", e)
        except OSError as e:
            log.error("Cannot read %s: %s", raw, e)
            rc = 2
    for f in fd.files:
        print(f"{f.format.value}\t{f.path}")
    return rc


def _cmd_merge(args, cfg: Settings) -> int:
    t0 = time.time()
    base_path = Path(args.base)
    try:
        _, base = import_file(base_path)
    except FileNotFoundError:
        log.error("Base file not found: %s", base_path)
        return 2
    except (OSError, ValueError) as e:
        log.error("Failed to import base %s: %s", base_path, e)
        return 2

    sources: List[Collection] = []
    source_paths: List[str] = []
    for raw in args.source:
        try:
            _, src = import_file(Path(raw))
        except (OSError, ValueError) as e:
            log.warning("Skipping source %s: %s", raw, e)
            continue
        sources.append(src)
        source_paths.append(str(Path(raw)))

    result = merge_collections(base, sources)

    report = validate_collection(result.collection)
    for err in report.errors:
        log.warning("Validation: %s", err)

    indent = args.pretty or cfg.pretty_json
    out_path: Optional[Path] = Path(args.out) if args.out else None
    try:
        if out_path is not None:
            write_anybox_json(out_path, result.collection, indent=indent)
        else:
            sys.stdout.write(dumps_anybox_json(result.collection, indent=indent))
    except OSError as e:
        log.error("Failed to write output: %s", e)
        return 2

    if cfg.record_session and not args.no_session:
        _record_merge(cfg, base_path, source_paths, result.enhanced, out_path)

    log.info(
        "Done in %d ms: %d bookmarks, %d enhanced from %d source(s).",
        int((time.time() - t0) * 1000),
        len(result.collection),
        result.enhanced,
        len(sources),
    )
    return 0


def _record_merge(
    cfg: Settings,
    base_path: Path,
    source_paths: List[str],
    enhanced: int,
    out_path: Optional[Path],
) -> None:
    mgr = SessionManager(cfg.session_path)
    try:
        session = mgr.load() or Session()
        session.working_dir = str(base_path.resolve().parent)
        session.current_file = str((out_path or base_path).resolve())
        session.add_merge_record(str(base_path), source_paths, enhanced)
        mgr.save(session)
    except (OSError, ValueError) as e:
        log.warning("Could not record merge in session (%s): %s", mgr.path, e)


def _cmd_validate(args) -> int:
    path = Path(args.path)
    try:
        _, collection = import_file(path)
    except (OSError, ValueError) as e:
        log.error("Failed to import %s: %s", path, e)
        return 2
    report = validate_collection(collection)
    for err in report.errors:
        print(str(err))
    if report.valid:
        log.info("%s: %d bookmarks, no problems found.", path, len(collection))
        return 0
    log.warning("%s: %d problems found.", path, len(report.errors))
    return 1


def _cmd_session(args, cfg: Settings) -> int:
    mgr = SessionManager(cfg.session_path)
    if args.action == "clear":
        mgr.clear()
        return 0

    try:
        session = mgr.load()
    except ValueError as e:
        log.error("%s", e)
        return 2
    if session is None:
        print("No session found.")
        return 0
    print(f"Working dir:   {session.working_dir}")
    print(f"Current file:  {session.current_file}")
    if session.last_modified is not None:
        print(f"Last modified: {session.last_modified:%Y-%m-%d %H:%M:%S}")
    print(f"Merge history: {len(session.merge_history)} records")
    for i, rec in enumerate(session.merge_history, start=1):
        print(f"  {i}. {rec.date:%Y-%m-%d %H:%M:%S} base={rec.base_file} sources={rec.source_files} enhanced={rec.enhanced}")
    return 0
