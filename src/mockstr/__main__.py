"""CLI entry point: serve a seeded relay simulator on a real port.

Runs a [RelayServer][mockstr.transport.server.RelayServer] until SIGINT or
SIGTERM, for clients that are not driven through Playwright (a dev server
pointed at ``ws://127.0.0.1:7000``, manual exploration, another test
process).

Examples:
    ```bash
    python -m mockstr --seed seeds/repos.yaml
    python -m mockstr --config mockstr.yaml --port 0 --debug
    python -m mockstr --host 0.0.0.0 --port 7777 --log-level DEBUG
    ```
"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import Any

import yaml

from mockstr.core.config import MockstrConfig
from mockstr.core.exceptions import ConfigurationError
from mockstr.core.logger import Logger, StructuredFormatter
from mockstr.core.yaml import load_yaml
from mockstr.relay import RelaySimulator
from mockstr.transport import RelayServer


logger = Logger("cli")


def _seconds(value: str) -> float:
    seconds = float(value)
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return seconds


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments for the relay server."""
    parser = argparse.ArgumentParser(
        prog="mockstr",
        description="Mockstr deterministic Nostr relay simulator",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="YAML config path (simulator, server, seed_files)",
    )

    parser.add_argument(
        "--seed",
        type=Path,
        nargs="+",
        action="extend",
        default=[],
        metavar="FILE",
        help="YAML/JSON file with a list of wire events to seed (repeatable)",
    )

    parser.add_argument("--host", help="Bind address (overrides config)")

    parser.add_argument("--port", type=int, help="Bind port, 0 for ephemeral (overrides config)")

    parser.add_argument(
        "--latency",
        type=_seconds,
        metavar="SECONDS",
        help="Hold every relay frame this long before delivery (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every frame received and sent",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure the root logger with structured formatting.

    Installs a ``StructuredFormatter`` on the root handler so that all log
    output is unified as ``level name message key=value ...``.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def build_config(args: argparse.Namespace) -> MockstrConfig:
    """Load the YAML config (if any) and apply command-line overrides."""
    config = MockstrConfig.from_yaml(args.config) if args.config else MockstrConfig()
    if args.host is not None:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port
    if args.latency is not None:
        config.simulator.latency = args.latency
    if args.debug:
        config.simulator.debug = True
    config.seed_files.extend(args.seed)
    return config


def load_seed_file(path: Path) -> list[dict[str, Any]]:
    """Read a list of wire events from a YAML or JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigurationError: If the file is not valid YAML or not a list of objects.
    """
    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in seed file {path}: {e}") from e
    if data == {}:
        return []
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ConfigurationError(f"seed file {path} must contain a list of event objects")
    return data


async def serve(config: MockstrConfig) -> int:
    """Seed a simulator and serve it until a shutdown signal arrives."""
    simulator = RelaySimulator(config.simulator)
    for path in config.seed_files:
        events = load_seed_file(path)
        try:
            simulator.seed_events(events)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid event in seed file {path}: {e}") from e
        logger.info("seed_file_loaded", path=str(path), events=len(events))

    stop = asyncio.Event()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info("shutdown_signal", signal=sig.name)
        stop.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal, sig)

    async with RelayServer(simulator, config.server) as server:
        logger.info("relay_ready", url=server.url, events=len(simulator.store))
        await stop.wait()
        simulator.close()
    return 0


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, load config and seeds, run the server."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = build_config(args)
        return await serve(config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error("config_failed", error=str(e))
        return 1
    except OSError as e:
        logger.error("server_failed", error=str(e))
        return 1


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
