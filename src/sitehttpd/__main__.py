"""
=============================================================================
SITEHTTPD CLI ENTRY POINT
=============================================================================

    # Serve ./website on 127.0.0.1:8080
    python -m sitehttpd

    # Another directory and port
    python -m sitehttpd --root ./public --port 3000

    # Keep the window open after exit (double-click launches)
    python -m sitehttpd --pause-on-exit

Defaults come from the environment (SITE_PORT, SITE_ROOT, ...), see
ServerConfig.from_env(); flags override them.

Exit codes:
    0   Stopped with the console command
    1   Could not start (missing content root, port in use, bad config)

=============================================================================
"""

import argparse
import sys
from typing import Optional, Sequence

from . import __version__
from .config import ServerConfig
from .http import StartupError
from .server import SiteServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Create the argument parser, with defaults taken from the environment."""
    parser = argparse.ArgumentParser(
        prog="sitehttpd",
        description="Minimal static site HTTP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m sitehttpd                         # ./website on 127.0.0.1:8080
  python -m sitehttpd --root ./public         # Another content root
  python -m sitehttpd --port 3000 --workers 4
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
    parser.add_argument(
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Per-connection socket timeout in seconds (default: none)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # SITE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.content_root,
        help=f"Directory with the website (default: {defaults.content_root})",
    )
    parser.add_argument(
        "--allow-path-traversal",
        action="store_true",
        default=defaults.allow_path_traversal,
        help="Serve files outside the content root (unsafe)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # PERFORMANCE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=defaults.workers,
        help=f"Number of worker threads (default: {defaults.workers})",
    )
    parser.add_argument(
        "--queue-size",
        type=int,
        default=defaults.queue_size,
        help="Max connections waiting for a worker, 0 = unbounded (default: 0)",
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING / META
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})",
    )
    parser.add_argument(
        "--pause-on-exit",
        action="store_true",
        help="Wait for Enter before the process exits",
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"sitehttpd {__version__}",
    )

    return parser


def finish_wait():
    """Let the user read the last messages before the window closes."""
    print("Press enter to continue...")
    try:
        input()
    except EOFError:
        pass


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit code.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error! Invalid SITE_* environment variable: {e}", file=sys.stderr)
        return 1

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        content_root=args.root,
        allow_path_traversal=args.allow_path_traversal,
        workers=args.workers,
        queue_size=args.queue_size,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    print("Starting web server...")

    exit_code = 0
    try:
        server = SiteServer(config)
        server.run()
    except (StartupError, ValueError) as e:
        print(f"Error! {e}", file=sys.stderr)
        exit_code = 1

    if args.pause_on_exit:
        finish_wait()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
