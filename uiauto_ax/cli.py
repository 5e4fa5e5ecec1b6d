# uiauto_ax/cli.py
"""
@file cli.py
@brief Command-line interface: dump, search and path over a tree fixture.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

import yaml

from .backends.memory import MemoryHandleService
from .exceptions import ConfigError, SearchFailure, ServiceError
from .inspector import build_path, dump_tree, format_tree, render_path, write_tree
from .logsetup import setup_logging
from .session import AXSession
from .settings import EngineSettings
from .timinglogger import TIMING_LOGGER


def _configure_timing_logger_from_env() -> None:
    """Enable timing events from environment variables."""
    enabled = os.getenv("UIAUTO_AX_TIMING_LOGGING", "").lower() in {"1", "true", "yes", "on"}
    if not enabled:
        return
    TIMING_LOGGER.configure(file_path=os.getenv("UIAUTO_AX_TIMING_LOG_FILE"))
    TIMING_LOGGER.enable()


def _parse_filters(pairs: Optional[List[str]]) -> Dict[str, Any]:
    """``["enabled=true", "title=OK"]`` -> ``{"enabled": True, "title": "OK"}``."""
    filters: Dict[str, Any] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Invalid filter format: {pair} (expected KEY=VALUE)")
        key, value = pair.split("=", 1)
        filters[key.strip()] = yaml.safe_load(value) if value else ""
    return filters


def _add_fixture_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("fixture", help="Path to a YAML tree fixture")
    parser.add_argument("--pid", type=int, default=None, help="Application to start from (default: the first one)")


def _add_search_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("type", help="Element type, e.g. button or buttons")
    parser.add_argument("--filter", "-f", action="append", help="Filter in KEY=VALUE format (can be used multiple times)")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    argv = argv if argv is not None else sys.argv[1:]
    _configure_timing_logger_from_env()

    p = argparse.ArgumentParser(
        prog="uiauto-ax",
        description="uiauto-ax - accessibility tree attribute resolution and search",
    )
    p.add_argument("--config", "-c", default=None, help="Path to engine settings YAML")
    p.add_argument("--log-level", default=None, help="Console log level (overrides settings)")
    sub = p.add_subparsers(dest="cmd", required=True)

    # -------------------------
    # dump
    # -------------------------
    dump = sub.add_parser("dump", help="Dump the element tree")
    _add_fixture_args(dump)
    dump.add_argument("--format", choices=("text", "json", "yaml"), default="text", help="Output format")
    dump.add_argument("--out", "-o", default=None, help="Write json/yaml output to this file or directory")
    dump.add_argument("--query", "-q", default=None, help="Filter elements by contains; use 'regex:<pattern>' for regex search")
    dump.add_argument("--max-nodes", type=int, default=5000, help="Max number of elements to visit")

    # -------------------------
    # search
    # -------------------------
    srch = sub.add_parser("search", help="Search for elements by type and filters")
    _add_fixture_args(srch)
    _add_search_args(srch)

    # -------------------------
    # path
    # -------------------------
    pathp = sub.add_parser("path", help="Print the element path of a search result")
    _add_fixture_args(pathp)
    _add_search_args(pathp)

    args = p.parse_args(argv)

    try:
        settings = EngineSettings.load(args.config) if args.config else EngineSettings()
    except ConfigError as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or settings.logging.level, settings.logging.file)
    if settings.logging.timing:
        TIMING_LOGGER.enable()

    try:
        service = MemoryHandleService.from_yaml(args.fixture)
        session = AXSession(service, settings)
        if args.pid is not None:
            root = session.application(args.pid)
        else:
            root = session.element(service.applications[0])
    except (ConfigError, ServiceError) as e:
        print(f"Error loading fixture: {e}", file=sys.stderr)
        return 1

    if args.cmd == "dump":
        result = dump_tree(root, max_nodes=args.max_nodes, query=args.query)
        if args.format == "text":
            print(format_tree(result))
        elif args.out:
            out_path = write_tree(result, args.out, fmt=args.format)
            print(json.dumps({"status": "ok", "output": out_path, "elements": len(result["elements"])}, indent=2))
        elif args.format == "json":
            print(json.dumps(result, indent=2, ensure_ascii=False))
        else:
            print(yaml.safe_dump(result, sort_keys=False, allow_unicode=True), end="")
        return 0

    try:
        filters = _parse_filters(args.filter)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        found = root.search(args.type, filters)
    except SearchFailure as e:
        print(str(e), file=sys.stderr)
        return 2
    except ServiceError as e:
        print(f"Service error: {e}", file=sys.stderr)
        return 1

    elements = found if isinstance(found, list) else [found]

    if args.cmd == "search":
        for element in elements:
            print(repr(element))
        if isinstance(found, list):
            print(f"{len(found)} match(es)", file=sys.stderr)
        return 0

    if args.cmd == "path":
        for element in elements:
            print(build_path(element))
            for depth, entry in enumerate(render_path(element)):
                print(f"{'  ' * depth}{entry}")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
