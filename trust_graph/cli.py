"""
trust_graph/cli.py: Command-line interface for the trust graph engine.

Reads a JSON credential export, builds the trust graph and prints results:

Usage:
    python -m trust_graph graph   --credentials creds.json --root EOrg...
    python -m trust_graph graph   --aid EUser... --depth 2 --summary
    python -m trust_graph score   EUser...
    python -m trust_graph top     -n 5 --csv top.csv
    python -m trust_graph summary

--credentials and --root fall back to the TRUST_GRAPH_CREDENTIALS and
TRUST_GRAPH_ROOT_AID environment variables.

Exit codes: 0 success, 1 credential store unavailable, 2 usage error.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict

from trust_graph.config import DEFAULT_CONFIG
from trust_graph.exceptions import CredentialStoreError
from trust_graph.graph.builder import TrustGraphBuilder
from trust_graph.metrics.score import TrustScoreCalculator, scores_to_dataframe
from trust_graph.pipeline import run_trust_pipeline
from trust_graph.storage.json_store import JsonFileCredentialStore

ENV_CREDENTIALS = "TRUST_GRAPH_CREDENTIALS"
ENV_ROOT_AID = "TRUST_GRAPH_ROOT_AID"


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "WARNING") -> None:
    """Configure the root logger on stderr so stdout stays machine-readable."""
    numeric = getattr(logging, level.upper(), logging.WARNING)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s: %(message)s"
    datefmt = "%H:%M:%S"
    logging.basicConfig(level=numeric, format=fmt, datefmt=datefmt, stream=sys.stderr)


logger = logging.getLogger("trust_graph.cli")


def _emit(payload: dict) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _resolve_inputs(args: argparse.Namespace) -> tuple[JsonFileCredentialStore, str] | None:
    credentials = args.credentials or os.environ.get(ENV_CREDENTIALS)
    root = args.root or os.environ.get(ENV_ROOT_AID)
    if not credentials:
        print(f"error: --credentials (or ${ENV_CREDENTIALS}) is required", file=sys.stderr)
        return None
    if not root:
        print(f"error: --root (or ${ENV_ROOT_AID}) is required", file=sys.stderr)
        return None
    return JsonFileCredentialStore(credentials), root


# ── Subcommands ───────────────────────────────────────────────────────────────

def cmd_graph(args: argparse.Namespace) -> int:
    """Print the full graph, or the neighborhood of --aid."""
    inputs = _resolve_inputs(args)
    if inputs is None:
        return 2
    store, root = inputs

    if args.depth is not None and args.aid is None:
        print("error: --depth requires --aid", file=sys.stderr)
        return 2
    if args.depth is not None and args.depth < 0:
        print("error: --depth must be >= 0", file=sys.stderr)
        return 2

    report = run_trust_pipeline(store, root, DEFAULT_CONFIG, aid=args.aid, depth=args.depth)
    payload = report.graph.to_dict()
    if args.summary:
        payload["summary"] = asdict(report.summary)
    _emit(payload)
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    """Print the trust score of one identity."""
    inputs = _resolve_inputs(args)
    if inputs is None:
        return 2
    store, root = inputs

    graph = TrustGraphBuilder(store, root, DEFAULT_CONFIG).build()
    score = TrustScoreCalculator(DEFAULT_CONFIG.weights).calculate_score(graph, args.aid)
    _emit(asdict(score))
    return 0


def cmd_top(args: argparse.Namespace) -> int:
    """Print the top-N ranking as a table, optionally exporting it to CSV."""
    inputs = _resolve_inputs(args)
    if inputs is None:
        return 2
    store, root = inputs

    report = run_trust_pipeline(store, root, DEFAULT_CONFIG, top_n=args.n)
    df = scores_to_dataframe(report.top_scores)
    if args.csv:
        df.to_csv(args.csv, index=False)
        logger.info("Top %d scores written to %s.", len(df), args.csv)
    print(df.round({"score": 3}).to_string(index=False))
    return 0


def cmd_summary(args: argparse.Namespace) -> int:
    """Print the score summary."""
    inputs = _resolve_inputs(args)
    if inputs is None:
        return 2
    store, root = inputs

    report = run_trust_pipeline(store, root, DEFAULT_CONFIG)
    _emit(asdict(report.summary))
    return 0


# ── Parser ────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trust_graph",
        description="Build an organization trust graph from credentials and rank its members.",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    def add_common_flags(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--credentials", default=None, metavar="PATH",
            help=f"JSON credential export (default: ${ENV_CREDENTIALS})",
        )
        p.add_argument(
            "--root", default=None, metavar="AID",
            help=f"Organization root identifier (default: ${ENV_ROOT_AID})",
        )
        p.add_argument(
            "--log-level", default="WARNING",
            choices=["DEBUG", "INFO", "WARNING", "ERROR"],
            help="Logging verbosity on stderr (default: WARNING)",
        )

    # graph
    p_graph = subparsers.add_parser("graph", help="Print the trust graph as JSON")
    add_common_flags(p_graph)
    p_graph.add_argument("--aid", default=None, help="Restrict to this identity's neighborhood")
    p_graph.add_argument(
        "--depth", type=int, default=None,
        help=f"Neighborhood hops around --aid (default: {DEFAULT_CONFIG.default_neighborhood_depth})",
    )
    p_graph.add_argument("--summary", action="store_true", help="Include the score summary")
    p_graph.set_defaults(func=cmd_graph)

    # score
    p_score = subparsers.add_parser("score", help="Print one identity's trust score")
    add_common_flags(p_score)
    p_score.add_argument("aid", metavar="AID")
    p_score.set_defaults(func=cmd_score)

    # top
    p_top = subparsers.add_parser("top", help="Print the highest trust scores")
    add_common_flags(p_top)
    p_top.add_argument(
        "-n", type=int, default=DEFAULT_CONFIG.default_top_n,
        help=f"Number of identities (default: {DEFAULT_CONFIG.default_top_n})",
    )
    p_top.add_argument("--csv", default=None, metavar="PATH", help="Also write the table to CSV")
    p_top.set_defaults(func=cmd_top)

    # summary
    p_summary = subparsers.add_parser("summary", help="Print the trust score summary")
    add_common_flags(p_summary)
    p_summary.set_defaults(func=cmd_summary)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)
    try:
        return args.func(args)
    except CredentialStoreError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
