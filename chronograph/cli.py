"""
chronograph.cli
===============

Command-line access to the versioning operations.

Examples
--------
$ chronograph init-db
$ chronograph entity --label Company --state '{"name": "ACME"}'
$ chronograph patch 1 '{"status": "ACTIVE"}' --date 1700000000000
$ chronograph patch-from 1 2
$ chronograph show --png images/acme.png

Every command runs in one store transaction and prints JSON on stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from typing import Any, Dict, List, Optional

from sqlmodel import Session

from chronograph.db import create_all, make_engine
from chronograph.errors import StoreConflictError, TransitionError
from chronograph.graph import PropertyGraph
from chronograph.graph_db import DBGraphStore
from chronograph.lifecycle import create_entity, patch, patch_from, update
from chronograph.settings import DB_URL, LOG_LEVEL

logger = logging.getLogger(__name__)


def _json_map(text: str) -> Dict[str, Any]:
    try:
        value = json.loads(text)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from None
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError("expected a JSON object")
    return value


def _node_json(graph: PropertyGraph, node: int) -> Dict[str, Any]:
    return {"id": node, "labels": graph.labels(node), "properties": graph.properties(node)}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chronograph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Chronograph entity versioning
            -----------------------------
            Dates are epoch milliseconds; omit --date to use the current time.
            """
        ),
    )
    parser.add_argument("--db", default=DB_URL, help="SQLAlchemy database URL (default: %(default)s)")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create tables (safe if they already exist)")

    p = sub.add_parser("entity", help="create an entity, optionally with its first state")
    p.add_argument("--props", type=_json_map, default=None, help="entity properties as JSON")
    p.add_argument("--label", default="", help="extra entity label")
    p.add_argument("--state", type=_json_map, default=None, help="first state properties as JSON")
    p.add_argument("--state-label", default="", help="extra label for the first state")
    p.add_argument("--date", type=int, default=None)

    for name, help_text in (("update", "add a state holding exactly PROPS"),
                            ("patch", "add a state derived from the current one")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("entity", type=int)
        p.add_argument("props", type=_json_map, nargs="?", default=None)
        p.add_argument("--label", default="", help="additional state label")
        p.add_argument("--date", type=int, default=None)

    p = sub.add_parser("patch-from", help="add a state derived from an earlier state")
    p.add_argument("entity", type=int)
    p.add_argument("state", type=int)
    p.add_argument("--date", type=int, default=None)

    p = sub.add_parser("show", help="print the whole graph")
    p.add_argument("--png", default=None, help="also draw the graph to this PNG file")
    return parser


def run(args: argparse.Namespace, store: DBGraphStore) -> Any:
    """Execute one parsed command against *store* and return its JSON payload."""
    logger.debug(f"Running command {args.command}")
    if args.command == "show":
        graph = store.load()
        if args.png:
            from chronograph.viz import plot_property_graph
            plot_property_graph(graph, args.png)
        return graph.to_json()

    with store.transaction() as graph:
        if args.command == "entity":
            node = create_entity(graph, args.props, args.label, args.state, args.state_label, args.date)
        elif args.command == "update":
            node = update(graph, args.entity, args.props, args.label, args.date)
        elif args.command == "patch":
            node = patch(graph, args.entity, args.props, args.label, args.date)
        elif args.command == "patch-from":
            node = patch_from(graph, args.entity, args.state, args.date)
        else:
            raise ValueError(f"unknown command {args.command}")
        return _node_json(graph, node)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    engine = make_engine(args.db)
    create_all(engine)
    if args.command == "init-db":
        print("✅ chronograph schema initialised")
        return 0

    with DBGraphStore(Session(engine)) as store:
        try:
            payload = run(args, store)
        except (TransitionError, StoreConflictError) as exc:
            print(f"⛔ {exc}", file=sys.stderr)
            return 1
        except KeyError as exc:
            print(f"⛔ {exc.args[0] if exc.args else exc}", file=sys.stderr)
            return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
