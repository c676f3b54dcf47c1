"""
fwatch - Main entry point

Watches a directory and moves each new file into the destination configured
for its extension.
"""

import argparse
import signal
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from app.utils.config import ConfigError, default_config_path, get_settings, load_routing_config
from domains.file_routing.events import EventSource, WatchChannelClosed, WatchSubscriptionError
from domains.file_routing.pipeline import EventPipeline
from domains.file_routing.rules import ensure_destination_dirs

__version__ = "0.1.0"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "INFO") -> None:
    """Send loguru output to stderr at ``level``."""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level.upper())


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments."""

    parser = argparse.ArgumentParser(
        prog="fwatch",
        description="Move new files from a watched directory by extension.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: $XDG_CONFIG_HOME/fwatch/config.yaml).",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information.",
    )

    return parser.parse_args(argv)


def run(pipeline: EventPipeline, source: EventSource, watch_dir: Path) -> int:
    """
    Subscribe to ``watch_dir`` and run the pipeline until stopped.

    SIGINT/SIGTERM stop the pipeline cleanly.

    Returns:
        Process exit code
    """
    try:
        subscription = source.subscribe(watch_dir)
    except WatchSubscriptionError as e:
        logger.error(f"Failed to watch directory: {e}")
        return 1

    def _signal_handler(signum, frame):  # noqa: D401
        logger.info(f"Received signal {signum}, shutting down.")
        pipeline.stop()

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    try:
        pipeline.run(subscription)
    except WatchChannelClosed as e:
        logger.error(f"Watcher failed: {e}")
        return 1
    finally:
        subscription.close()

    logger.info("fwatch stopped.")
    return 0


def main(argv: Optional[List[str]] = None, source: Optional[EventSource] = None) -> int:
    """Entry point for the CLI."""

    args = parse_args(argv)

    if args.version:
        print(f"fwatch {__version__}")
        return 0

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid settings: {e}")
        return 1

    configure_logging(settings.log_level)

    config_path = args.config or settings.config_path or default_config_path()

    try:
        config = load_routing_config(config_path)
    except ConfigError as e:
        logger.error(f"Failed to load config: {e}")
        return 1

    if not config.watch_dir.is_dir():
        logger.error(f"Watch directory does not exist: {config.watch_dir}")
        return 1

    if config.create_dirs:
        ensure_destination_dirs(config.rules)

    if source is None:
        from domains.file_routing.watchers.filesystem import WatchdogEventSource

        source = WatchdogEventSource()

    pipeline = EventPipeline.from_config(config, settings)

    logger.info(f"fwatch started - watching: {config.watch_dir}")
    return run(pipeline, source, config.watch_dir)


if __name__ == "__main__":  # pragma: no cover - CLI bridge
    sys.exit(main())
