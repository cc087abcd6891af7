from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

from .bootstrap import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hearth Calendar command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    occurrences = subparsers.add_parser("occurrences", help="List resolved occurrences in a date range.")
    occurrences.add_argument("--start", required=True, help="First day, YYYY-MM-DD.")
    occurrences.add_argument("--end", required=True, help="Last day, YYYY-MM-DD.")
    occurrences.add_argument("--active-only", action="store_true", help="Leave out cancelled occurrences.")

    importer = subparsers.add_parser("import", help="Preview or apply an import of events from a JSON file.")
    importer.add_argument("file", type=Path, help="JSON array of events, or an object with an 'events' array.")
    choice = importer.add_mutually_exclusive_group()
    choice.add_argument("--resolutions", type=Path, help="JSON object mapping conflict index to skip/update/create.")
    choice.add_argument("--all", choices=("skip", "update", "create"), help="Apply one decision to every conflict.")

    exporter = subparsers.add_parser("export", help="Export events and overrides as JSON.")
    exporter.add_argument("--output", type=Path, help="Write to a file instead of stdout.")

    feed = subparsers.add_parser("feed", help="Render an iCalendar feed of upcoming occurrences.")
    feed.add_argument("--name", default="Family Calendar")
    feed.add_argument("--person", help="Only occurrences this member drops off or picks up.")
    feed.add_argument("--output", type=Path, help="Write to a file instead of stdout.")

    api_parser = subparsers.add_parser("api", help="Start the FastAPI server exposing the API functions.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    return parser


def _emit(payload: Any, output: Optional[Path] = None) -> None:
    data = payload if isinstance(payload, bytes) else orjson.dumps(payload, option=orjson.OPT_INDENT_2) + b"\n"
    if output:
        output.write_bytes(data)
        logger.info("Wrote %s", output)
    else:
        sys.stdout.buffer.write(data)


def _read_events(path: Path) -> list:
    data = orjson.loads(path.read_bytes())
    if isinstance(data, dict):
        data = data.get("events", [])
    return data


def _resolutions(args: argparse.Namespace, conflict_count: int) -> Optional[Dict[str, str]]:
    if args.all:
        return {str(index): args.all for index in range(conflict_count)}
    if args.resolutions:
        return orjson.loads(args.resolutions.read_bytes())
    return None


def main(argv: Optional[list[str]] = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("Hearth Calendar CLI running %s", args.command)

    # deferred so the parser works without a configured store
    from .api import call_api

    if args.command == "occurrences":
        _emit(call_api("occurrences_between", start=args.start, end=args.end, include_cancelled=not args.active_only))
    elif args.command == "import":
        events = _read_events(args.file)
        preview = call_api("preview_import", events=events)
        resolutions = _resolutions(args, len(preview["conflicts"]))
        if resolutions is None:
            _emit(preview)
        else:
            _emit(call_api("resolve_import", events=events, resolutions=resolutions))
    elif args.command == "export":
        _emit(call_api("export_events"), args.output)
    elif args.command == "feed":
        result = call_api("calendar_feed", name=args.name, filter_person=args.person)
        _emit(result["ics"].encode("utf-8"), args.output)
    elif args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
