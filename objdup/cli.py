"""Command-line interface — every command outputs JSON to stdout."""

from __future__ import annotations

import argparse
import json
import os
import sys

from objdup.errors import (
    ObjDupError,
    INVALID_TIMELINE,
    MISSING_FIELD,
    EXIT_SUCCESS,
    EXIT_VALIDATION,
    EXIT_EXECUTION,
    EXIT_SYSTEM,
)
from objdup.models import DUPLICATION_MODES, MODE_COUNT, MODE_LIMIT, DuplicationRequest
from objdup.timeline import Timeline

# Dialog defaults, overridable through the environment
DEFAULT_INTERVAL = 40
DEFAULT_COPIES = 5
DEFAULT_LIMIT_FRAME = 1000


def _env_int(name: str, default: int) -> int:
    """Read an integer default from the environment, ignoring junk values."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _json_out(data: dict, exit_code: int = EXIT_SUCCESS) -> int:
    """Print JSON to stdout and return exit code."""
    print(json.dumps(data, indent=2))
    return exit_code


def _json_error(exc: ObjDupError, exit_code: int = EXIT_EXECUTION) -> int:
    """Print an ObjDupError as JSON and return the appropriate exit code."""
    return _json_out(exc.to_dict(), exit_code)


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------

def _read_timeline_input(timeline_arg: str | None = None, timeline_json: str | None = None) -> Timeline:
    """Build a Timeline from inline JSON or stdin (if '-')."""
    if timeline_json:
        text = timeline_json
    elif timeline_arg == "-":
        text = sys.stdin.read()
    else:
        raise ObjDupError(
            code=MISSING_FIELD,
            message="No timeline provided — use '-' for stdin or --timeline-json",
            recovery=["Use '-' to read from stdin", "Use --timeline-json '{...}'"],
        )
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ObjDupError(
            code=INVALID_TIMELINE,
            message=f"Invalid JSON: {exc}",
            recovery=["Check JSON syntax — missing commas, brackets, or quotes"],
            context={"parse_error": str(exc)},
        ) from exc
    return Timeline.from_dict(data)


def _request_from_args(args) -> dict:
    """--limit-frame selects limit mode; otherwise count mode."""
    copies = args.copies
    limit_frame = args.limit_frame
    mode = MODE_LIMIT if limit_frame is not None else MODE_COUNT
    if copies is None:
        copies = _env_int("OBJDUP_COPIES", DEFAULT_COPIES)
    if limit_frame is None:
        limit_frame = _env_int("OBJDUP_LIMIT_FRAME", DEFAULT_LIMIT_FRAME)
    return {
        "interval": args.interval,
        "mode": mode,
        "copies": copies,
        "limit_frame": limit_frame,
        "stop_on_failure": args.stop_on_failure,
    }


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------

def cmd_capabilities(_args) -> int:
    """Output the machine-readable request and timeline schema."""
    caps = {
        "version": "1.0",
        "request": {
            "interval": "int (start-to-start frames, values below 1 become 1)",
            "mode": "'count' | 'limit'",
            "copies": "int >= 0 (used when mode is 'count')",
            "limit_frame": "int >= 0 (used when mode is 'limit'; copies start at or before it)",
            "stop_on_failure": "bool (stop an object's copies at its first rejected creation)",
        },
        "timeline": {
            "objects": "list[{id?: int, layer: int, start: int, end: int, payload?: str}]",
            "selected": "list[int], object ids, processed in this order",
            "focus": "int | absent, used only when nothing is selected",
            "busy": "bool, a busy host refuses edit access",
        },
        "modes": sorted(DUPLICATION_MODES),
        "defaults": {
            "interval": _env_int("OBJDUP_INTERVAL", DEFAULT_INTERVAL),
            "copies": _env_int("OBJDUP_COPIES", DEFAULT_COPIES),
            "limit_frame": _env_int("OBJDUP_LIMIT_FRAME", DEFAULT_LIMIT_FRAME),
        },
        "exit_codes": {"0": "success", "1": "validation_error", "2": "execution_error", "3": "system_error"},
        "progress_output": {
            "description": "During 'run', progress is emitted as JSONL on stderr",
            "format": {"progress": {"step": "int", "total": "int", "object": "str", "status": "'running' | 'done'"}},
            "suppress": "Use --quiet / -q to suppress progress output",
        },
    }
    return _json_out(caps)


def cmd_validate(args) -> int:
    """Validate a request against a timeline without creating anything."""
    from objdup.validation import validate_request
    try:
        timeline = _read_timeline_input(
            getattr(args, "timeline", None),
            getattr(args, "timeline_json", None),
        )
        result = validate_request(_request_from_args(args), timeline)
        code = EXIT_SUCCESS if result.valid else EXIT_VALIDATION
        return _json_out(result.to_dict(), code)
    except ObjDupError as exc:
        return _json_error(exc, EXIT_VALIDATION)


def _make_progress_callback(quiet: bool):
    """Return a progress callback that writes JSONL to stderr, or None if quiet."""
    if quiet:
        return None

    def _progress(step: int, total: int, label: str, status: str) -> None:
        line = json.dumps({"progress": {"step": step, "total": total, "object": label, "status": status}})
        print(line, file=sys.stderr, flush=True)

    return _progress


def cmd_run(args) -> int:
    """Duplicate the selected objects and print the result and new timeline."""
    from objdup.engine import run
    try:
        timeline = _read_timeline_input(
            getattr(args, "timeline", None),
            getattr(args, "timeline_json", None),
        )
        request = DuplicationRequest.from_dict(_request_from_args(args))
    except ObjDupError as exc:
        return _json_error(exc, EXIT_VALIDATION)

    try:
        callback = _make_progress_callback(getattr(args, "quiet", False))
        result = run(timeline, request, progress_callback=callback)
    except ObjDupError as exc:
        return _json_error(exc, EXIT_EXECUTION)

    return _json_out({
        "success": True,
        "result": result.to_dict(),
        "timeline": timeline.to_dict(),
    })


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _add_request_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("timeline", nargs="?", default=None,
                   help="'-' to read the timeline JSON from stdin")
    p.add_argument("--timeline-json", dest="timeline_json", default=None,
                   help="Inline timeline JSON string (alternative to stdin)")
    p.add_argument("--interval", type=int,
                   default=_env_int("OBJDUP_INTERVAL", DEFAULT_INTERVAL),
                   help="Start-to-start interval in frames (default: $OBJDUP_INTERVAL or 40)")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--copies", type=int, default=None,
                      help="Count mode: copies per object (default mode; $OBJDUP_COPIES or 5)")
    mode.add_argument("--limit-frame", dest="limit_frame", type=int, default=None,
                      help="Limit mode: last frame a copy may start at")
    p.add_argument("--stop-on-failure", dest="stop_on_failure", action="store_true", default=False,
                   help="Stop an object's copies at the first rejected creation (e.g. overlap)")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="objdup",
        description="Batch-duplicate timeline objects along their layer — all output is JSON",
    )
    sub = parser.add_subparsers(dest="command")

    # capabilities
    sub.add_parser("capabilities", help="Show the request and timeline schema")

    # validate
    p = sub.add_parser("validate", help="Preview a duplication run (dry-run)")
    _add_request_arguments(p)

    # run
    p = sub.add_parser("run", help="Duplicate the selected or focused objects")
    _add_request_arguments(p)
    p.add_argument("-q", "--quiet", action="store_true", default=False,
                   help="Suppress progress output on stderr")

    return parser


def main() -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(EXIT_VALIDATION)

    handlers = {
        "capabilities": cmd_capabilities,
        "validate": cmd_validate,
        "run": cmd_run,
    }

    try:
        exit_code = handlers[args.command](args)
    except ObjDupError as exc:
        exit_code = _json_error(exc, EXIT_SYSTEM)
    except Exception as exc:
        exit_code = _json_out({
            "error": True,
            "code": "UNEXPECTED_ERROR",
            "message": str(exc),
            "recovery": ["This is an unexpected error — please report it"],
        }, EXIT_SYSTEM)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
