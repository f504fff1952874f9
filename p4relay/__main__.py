"""Entry point: run one p4 command through a resilient session.

This is the only place that turns a FatalCommandError into process exit.
"""

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from p4relay.config import Config
from p4relay.dependencies import Dependencies
from p4relay.services import FatalCommandError
from p4relay.utils.console import ColorfulFormatter

logger = logging.getLogger(__name__)

# Operators must treat this status as "manual intervention required"
FATAL_EXIT_CODE = 1
CONFIG_ERROR_EXIT_CODE = 2


def configure_logging(level: str = "INFO", use_colors: bool = True) -> None:
    """Configure colorful logging for the p4relay package.

    Args:
        level: Log level name
        use_colors: Whether to use ANSI colors (forced off when not a TTY)
    """
    if not sys.stderr.isatty():
        use_colors = False

    p4relay_logger = logging.getLogger("p4relay")
    p4relay_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Only add handler if not already configured
    if not p4relay_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        p4relay_logger.addHandler(handler)
        p4relay_logger.propagate = False

    logging.getLogger("asyncssh").setLevel(logging.WARNING)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="p4relay",
        description="Run a p4 command over a persistent SSH session with retries.",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help="retry budget for this command (default: P4RELAY_RETRIES)",
    )
    parser.add_argument("command", help="p4 command name, e.g. changes")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="command arguments")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None, config: Config | None = None) -> int:
    """Run one command and print its output.

    Stat records are printed as JSON lines, info lines as plain text.

    Returns:
        Process exit status
    """
    options = _parse_args(argv)
    try:
        config = config or Config.from_env()
        configure_logging(config.settings.log_level, config.settings.log_colors)
        deps = Dependencies.from_config(config)
    except FileNotFoundError as e:
        configure_logging()
        logger.critical("Cannot start p4relay: %s", e)
        return CONFIG_ERROR_EXIT_CODE

    try:
        with deps.api as api:
            result = api.run(options.command, options.args, retries=options.retries)
    except FatalCommandError as e:
        logger.critical("%s", e)
        return FATAL_EXIT_CODE

    for record in result.stats:
        print(json.dumps(record, default=lambda v: v.decode("utf-8", errors="replace")))
    for line in result.info:
        print(line)
    for warning in result.warnings:
        logger.warning("%s", warning)
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
