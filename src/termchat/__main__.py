"""CLI entrypoint for TermChat."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
import json
import logging
from pathlib import Path
import sys
from typing import Any

from .app import TermChatApp
from .config import apply_overrides, ensure_config_dir, load_config

LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termchat",
        description="TermChat - terminal chat client with simulated replies",
    )
    parser.add_argument(
        "-u",
        "--username",
        default=None,
        help="Name shown in the status bar (default: from config, else 'User')",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log the effective configuration and every telemetry event",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an alternate config.toml",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.username is not None:
        overrides["app"] = {"username": args.username}
    if args.verbose:
        overrides["telemetry"] = {"verbose": True}
        overrides["logging"] = {"level": "DEBUG"}
    return overrides


def _set_terminal_title(title: str) -> None:
    """Set the terminal window title with an OSC 0 sequence, when on a tty."""
    stream = sys.stdout
    if not stream.isatty():
        return
    stream.write(f"\x1b]0;{title}\x07")
    stream.flush()


def main(argv: Sequence[str] | None = None) -> None:
    """Load configuration, apply CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("termchat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"termchat {version}")
        return

    ensure_config_dir()
    config = load_config(args.config)
    overrides = _cli_overrides(args)
    if overrides:
        config = apply_overrides(config, overrides)

    app = TermChatApp(config=config)
    if args.verbose:
        LOGGER.info(
            "app.config",
            extra={"event": "app.config", "config": json.dumps(config, sort_keys=True)},
        )
    _set_terminal_title(f"{config['app']['title']} - {config['app']['username']}")
    app.run()


if __name__ == "__main__":
    main()
