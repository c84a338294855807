"""
=============================================================================
ROFIS CLI ENTRY POINT
=============================================================================

    # Serve the current directory on 127.0.0.1:8080
    python -m rofis

    # Serve ./site on all interfaces, port 3000
    rofis --host 0.0.0.0 --port 3000 --root ./site

    # Chatty logs, faster WATCH polling
    rofis -l DEBUG --watch-interval 0.05

Environment variables (ROFIS_PORT, ROFIS_ROOT, ...) provide the defaults;
flags given on the command line win.

=============================================================================
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_LEVELS, ServerConfig
from .server import FileServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rofis",
        description="Read-only HTTP file server with suffix path resolution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rofis                          # Serve . on 127.0.0.1:8080
  rofis -p 3000 -r ./site        # Serve ./site on port 3000
  rofis --host 0.0.0.0           # Listen on all interfaces
        """,
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})",
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.root_dir,
        help="Directory to serve (default: current directory)",
    )

    parser.add_argument(
        "--watch-interval",
        type=float,
        default=defaults.watch_interval,
        help=f"Seconds between file checks for WATCH requests (default: {defaults.watch_interval})",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Seconds to wait for a client to send its request (default: wait forever)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"rofis {__version__}",
    )

    return parser


def config_from_args(argv: Optional[List[str]] = None) -> ServerConfig:
    """Environment defaults overridden by command-line flags."""
    config = ServerConfig.from_env()
    args = build_parser(config).parse_args(argv)

    config.host = args.host
    config.port = args.port
    config.root_dir = args.root
    config.watch_interval = args.watch_interval
    config.timeout = args.timeout
    config.log_level = args.log_level
    return config


def main(argv: Optional[List[str]] = None) -> int:
    try:
        server = FileServer(config_from_args(argv))
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
