"""Command-line interface for livewatch."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from livewatch import __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="livewatch",
        description="Watch directories, run tasks on change and live reload browsers",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v verbose, -vv trace)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file path (default: <root>/.livewatch.yaml)",
    )
    parser.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Project root that watch patterns are relative to",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        default=None,
        help="Keep going after task warnings and fatal errors",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Live reload port (default: 35729)",
    )
    parser.add_argument(
        "--no-livereload",
        action="store_true",
        help="Do not start the live reload server",
    )
    parser.add_argument(
        "--no-beep",
        action="store_true",
        help="Do not beep on warnings and errors",
    )
    return parser


def build_overrides(parsed: argparse.Namespace) -> dict[str, Any]:
    """Translate parsed flags into a config override dict."""
    overrides: dict[str, Any] = {"force": parsed.force}
    livereload: dict[str, Any] = {"port": parsed.port}
    if parsed.no_livereload:
        livereload["enabled"] = False
    overrides["livereload"] = livereload
    if parsed.no_beep:
        overrides["beep"] = False
    if parsed.verbose:
        overrides["logging"] = {"verbose": min(2 + parsed.verbose, 4)}
    return overrides


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments. Returns the exit code."""
    from livewatch.config import load_config
    from livewatch.errors import ConfigError, LiveReloadBindError
    from livewatch.logging import get_logger, setup_logging
    from livewatch.orchestrator import WatchOrchestrator

    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        config = load_config(
            root=parsed.root,
            config_file=parsed.config,
            overrides=build_overrides(parsed),
        )
    except ConfigError as e:
        print(f"livewatch: {e}", file=sys.stderr)
        return 2

    setup_logging(config.logging)
    log = get_logger()
    log.info(
        "Watching %s (%d trigger(s), %d task(s))",
        parsed.root, len(config.triggers), len(config.tasks),
    )

    orchestrator = WatchOrchestrator(config, root=parsed.root)
    try:
        asyncio.run(orchestrator.run())
    except LiveReloadBindError:
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted, exiting")
    return 0


def main() -> None:
    sys.exit(run_cli(sys.argv[1:]))
