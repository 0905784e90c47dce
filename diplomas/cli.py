"""
CLI (Command Line Interface).

    diplomas fetch [--out snapshot.json]
    diplomas parse <page.html>
    diplomas mentors [--input snapshot.json] [--search text] [--sort total|mentor] [--asc]
    diplomas serve [--host 127.0.0.1] [--port 8000]

Credentials for live fetches come from CAS_USERNAME / CAS_PASSWORD
(environment or .env file).

Exit codes: 0 ok, 1 config/fetch error, 2 authentication failed.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

from diplomas.config import Settings, load_credentials
from diplomas.errors import AuthenticationError, DiplomasError
from diplomas.mentors import (
    SORT_FIELDS,
    aggregate_by_mentor,
    average_progress,
    filter_summaries,
    mentor_stats,
    sort_summaries,
    status_stage,
)
from diplomas.model import Diploma
from diplomas.parse import parse_file
from diplomas.service import fetch_diplomas
from diplomas.storage import load_diplomas, save_diplomas


console = Console()


def _print_json(diplomas: List[Diploma]) -> None:
    print(json.dumps([d.to_dict() for d in diplomas], ensure_ascii=False, indent=2))


def _fetch_live() -> List[Diploma]:
    username, password = load_credentials()
    return fetch_diplomas(username, password, Settings.from_env())


def _cmd_fetch(args: argparse.Namespace) -> int:
    """
    Log in, fetch and print (or save) all diplomas.
    """
    diplomas = _fetch_live()

    if args.out:
        save_diplomas(diplomas, args.out)
        print(f"Saved {len(diplomas)} diplomas to: {args.out}")
        return 0

    _print_json(diplomas)
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """
    Parse a saved list page without touching the network.
    """
    try:
        diplomas = parse_file(args.html_file)
    except OSError as exc:
        print(f"Cannot read {args.html_file}: {exc}", file=sys.stderr)
        return 1

    _print_json(diplomas)
    return 0


def _cmd_mentors(args: argparse.Namespace) -> int:
    """
    Print mentors with their number of diplomas as a table, plus overview stats.
    """
    if args.input:
        if not Path(args.input).exists():
            print(f"Snapshot not found: {args.input}", file=sys.stderr)
            return 1
        diplomas = load_diplomas(args.input)
    else:
        diplomas = _fetch_live()

    all_summaries = aggregate_by_mentor(diplomas)
    summaries = filter_summaries(all_summaries, args.search or "")
    summaries = sort_summaries(summaries, field=args.sort, descending=not args.asc)

    if not summaries:
        print("No mentors found.")
        return 0

    table = Table(title=f"Mentors ({len(summaries)} of {len(all_summaries)})", box=box.SIMPLE_HEAVY)
    table.add_column("Mentor")
    table.add_column("Diplomas", justify="right")
    table.add_column("Defended", justify="right")
    table.add_column("Progress", justify="right")

    for s in summaries:
        shown = s.shown_diplomas
        count = f"{len(shown)} / {s.total_diplomas}" if s.is_filtered else str(s.total_diplomas)
        # stage 8 = defended, 9 = archived
        done = sum(1 for d in shown if status_stage(d.status) >= 8)
        table.add_row(s.mentor, count, str(done), f"{average_progress(shown):.0%}")

    console.print(table)

    stats = mentor_stats(diplomas)
    console.print(
        f"Mentors: {stats.total_mentors}  "
        f"Diplomas: {stats.total_diplomas}  "
        f"Average per mentor: {stats.average:.1f}  "
        f"Median per mentor: {stats.median:g}"
    )
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    from diplomas.api import create_app

    app = create_app()
    app.run(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="diplomas", description="FINKI diploma portal scraper")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_fetch = sub.add_parser("fetch", help="Log in and fetch all diplomas")
    p_fetch.add_argument("--out", "-o", type=str, default=None, help="Write a JSON snapshot instead of printing")

    p_parse = sub.add_parser("parse", help="Parse a saved diploma list HTML page")
    p_parse.add_argument("html_file", type=str, help="Path to the saved HTML page")

    p_mentors = sub.add_parser("mentors", help="Show diplomas per mentor")
    p_mentors.add_argument("--input", "-i", type=str, default=None, help="Snapshot file (default: live fetch)")
    p_mentors.add_argument("--search", "-s", type=str, default="", help="Filter by mentor, student or title")
    p_mentors.add_argument("--sort", choices=SORT_FIELDS, default="total", help="Sort field")
    p_mentors.add_argument("--asc", action="store_true", help="Sort ascending")

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", type=str, default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "fetch": _cmd_fetch,
        "parse": _cmd_parse,
        "mentors": _cmd_mentors,
        "serve": _cmd_serve,
    }

    try:
        raise SystemExit(handlers[args.command](args))
    except AuthenticationError as exc:
        print(f"Authentication failed: {exc}", file=sys.stderr)
        raise SystemExit(2)
    except DiplomasError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)
