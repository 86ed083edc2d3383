"""Command line entry point: compile a YAML analyzer tree into analysis settings JSON."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
import logging
from pathlib import Path
import sys

import orjson
from pydantic import ValidationError

from analyzer_compiler.analysis.compiler import AnalyzerCompiler
from analyzer_compiler.config import CompilerSettings
from analyzer_compiler.errors import AnalyzerCompilerError
from analyzer_compiler.observability.logging import configure_logging
from analyzer_compiler.observability.tracing import init_tracing
from analyzer_compiler.tree.yaml_loader import load_tree_file


logger = logging.getLogger(__name__)

DEFAULT_ANALYZER_NAME = "oak_analyzer"


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="analyzer-compiler",
        description="Translate an analyzer definition tree into search engine analysis settings",
    )
    parser.add_argument(
        "tree",
        type=Path,
        help="YAML file holding the analyzers node (with a 'default' child)",
    )
    parser.add_argument(
        "--name",
        default=DEFAULT_ANALYZER_NAME,
        help=f"Name of the analyzer entry in the output (default: {DEFAULT_ANALYZER_NAME})",
    )
    parser.add_argument(
        "--indent",
        action="store_true",
        help="Pretty-print the JSON output",
    )
    parser.add_argument(
        "--log-level",
        help="Override ANALYZER_COMPILER_LOG_LEVEL",
    )
    return parser


def _load_settings(args: argparse.Namespace) -> CompilerSettings:
    overrides = {"log_level": args.log_level} if args.log_level else {}
    return CompilerSettings(**overrides)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = _load_settings(args)
    except ValidationError as exc:
        parser.error(str(exc))

    configure_logging(settings.log_level, json_output=settings.log_json)
    if settings.tracing_enabled:
        init_tracing(settings.service_name)

    try:
        root = load_tree_file(args.tree)
        registry = AnalyzerCompiler(settings).compile(root, args.name)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Unable to read analyzer tree %s: %s", args.tree, exc)
        return 1
    except AnalyzerCompilerError as exc:
        logger.error("Unable to compile analyzer %s: %s", args.name, exc)
        return 1

    options = orjson.OPT_INDENT_2 if args.indent else 0
    payload = registry.to_dict() if registry is not None else None
    sys.stdout.write(orjson.dumps(payload, option=options).decode("utf-8") + "\n")
    return 0
