"""
=============================================================================
WEB WORKER CLI ENTRY POINT
=============================================================================

    # Serve the current directory on localhost:8080
    python -m webworker

    # Serve ./www on port 3000, all interfaces
    python -m webworker --root ./www --port 3000 --host 0.0.0.0

    # Give up on clients that stall for more than 10 seconds
    python -m webworker --timeout 10

    # Log every raw request line
    python -m webworker --log-level DEBUG

Every flag defaults to the matching WEBWORKER_* environment variable
(see config.py), then to the built-in default.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """
    Build the argument parser.

    Args:
        defaults: Configuration whose values become the flag defaults.
    """
    parser = argparse.ArgumentParser(
        prog="webworker",
        description="Minimal one-request-per-connection HTTP file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m webworker                       # Serve . on 127.0.0.1:8080
  python -m webworker --root ./www          # Serve another directory
  python -m webworker --port 3000           # Custom port
  python -m webworker --strict-content-type # text/html on every 404
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Per-connection socket timeout in seconds (default: wait forever)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help=f"Directory to serve files from (default: {defaults.document_root})"
    )

    parser.add_argument(
        "--server-name",
        default=defaults.server_name,
        help=f"Server header and <cs371server> text (default: {defaults.server_name})"
    )

    parser.add_argument(
        "--strict-content-type",
        action="store_true",
        default=defaults.strict_content_type,
        help="Declare text/html on 404 responses instead of the inferred type"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"webworker {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace) -> ServerConfig:
    """Translate parsed CLI arguments to a ServerConfig."""
    return ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        document_root=args.root,
        server_name=args.server_name,
        strict_content_type=args.strict_content_type,
        log_level=args.log_level,
    )


def main(argv=None):
    """
    Main CLI entry point.

    Args:
        argv: Argument list (default: sys.argv[1:]).
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment setting: {e}", file=sys.stderr)
        sys.exit(1)

    args = build_parser(defaults).parse_args(argv)

    try:
        server = HTTPServer(config_from_args(args))
        server.run()
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
