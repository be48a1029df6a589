"""CLI entrypoint for stagehub."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
import logging
from pathlib import Path
import sys

from .config import ensure_config_dir, load_config
from .exceptions import CueValidationError
from .logging_utils import configure_logging
from .show import run_show

LOGGER = logging.getLogger("stagehub.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stagehub",
        description="stagehub - run a show cue through the in-process event hub",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a config.toml (defaults to ~/.config/stagehub/config.toml)",
    )
    parser.add_argument(
        "--pause",
        type=float,
        default=None,
        help="Seconds to wait between show steps (overrides config)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Load configuration, set up logging and play the show."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("stagehub")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"stagehub {version}")
        return 0

    if args.config is None:
        ensure_config_dir()
    config = load_config(config_path=args.config)
    if args.pause is not None:
        config["show"]["step_pause_seconds"] = max(0.0, args.pause)
    configure_logging(config["logging"])

    try:
        run_show(config)
    except CueValidationError as exc:
        LOGGER.error(
            "show.cue.invalid",
            extra={"event": "show.cue.invalid", "reason": str(exc)},
        )
        print(f"stagehub: invalid cue: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
