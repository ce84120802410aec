#!/usr/bin/env python3
"""Web server entrypoint — serves the investigator pages and JSON API.

Usage::

    # Run with default config (config/settings.yaml + environment)
    python scripts/serve.py

    # Custom config file and port
    python scripts/serve.py --config config/settings.yaml --port 8080

    # Override log level
    python scripts/serve.py --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import os
import signal
import sys

# Ensure project root is on sys.path so `src` is importable.
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import structlog

from src.core.config import Settings, load_settings
from src.core.exceptions import ConfigurationError
from src.core.logging import setup_logging
from src.web.app import start_web_server

logger = structlog.get_logger(__name__)


def check_credentials(settings: Settings) -> list[str]:
    """Names of the required credentials that are not set."""
    missing: list[str] = []
    for config in (settings.datadog, settings.llm):
        try:
            config.require()
        except ConfigurationError as exc:
            missing.append(exc.variable)
    return missing


async def run(args: argparse.Namespace) -> int:
    """Start the web server and run until interrupted."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level, fmt=args.log_format)

    missing = check_credentials(settings)
    if missing and not args.skip_credential_check:
        for variable in missing:
            logger.error("missing_credential", variable=variable)
        print(
            f"Missing required configuration: {', '.join(missing)}. "
            "Set them in the environment or config/settings.yaml.",
            file=sys.stderr,
        )
        return 1

    runner = await start_web_server(settings, host=args.host, port=args.port)

    # ── Wait for shutdown signal ──────────────────────────────────
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        await stop_event.wait()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")

    await runner.cleanup()
    logger.info("web_server_stopped")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="AI monitor investigator web server")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument("--log-level", default=None, help="Override log level (e.g. DEBUG)")
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Override log renderer",
    )
    parser.add_argument("--host", default=None, help="Bind address (default from config)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default from config)")
    parser.add_argument(
        "--skip-credential-check",
        action="store_true",
        help="Start even if Datadog/Llama credentials are missing",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
