"""Roomgrid CLI entry point.

Provides subcommands for running the Socket.IO layout server and for
generating layouts offline (JSON dump or ASCII preview). Accepts configuration
via flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from roomgrid import __version__
from roomgrid.layout import ConfigurationError, LayoutConfig, LayoutSet, coerce_seed, render_ascii

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()


def _add_layout_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--rows", type=int, default=None, help="Grid rows (default: env ROOMGRID_ROWS or 3)")
    p.add_argument("--columns", type=int, default=None, help="Grid columns (default: env ROOMGRID_COLUMNS or 3)")
    p.add_argument("--spacing", type=float, default=None, help="Distance between room origins (default: 20)")
    p.add_argument("--density", type=float, default=None, help="Extra-edge density factor (default: 0.05)")
    p.add_argument("--count", type=int, default=None, help="Number of layouts to generate (default: 3)")
    p.add_argument("--seed", default=None, help="Root seed; integers are used as-is, other strings are hashed")


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Roomgrid Layout Server

    Generate grids of connected rooms and serve them to an actuator over HTTP
    and Socket.IO, or generate them offline for inspection. Configuration can
    be provided via CLI flags or environment variables. If both are present,
    CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                   Bind address for the web server (default: 0.0.0.0)
          PORT                   Port for the web server (default: 5000)
          ROOMGRID_ROWS          Grid rows (default: 3)
          ROOMGRID_COLUMNS       Grid columns (default: 3)
          ROOMGRID_SPACING       Room spacing (default: 20)
          ROOMGRID_DENSITY       Extra-edge density (default: 0.05)
          ROOMGRID_LAYOUT_COUNT  Layouts per set (default: 3)
          ROOMGRID_SEED          Root seed (default: random)

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print three 4x6 layouts as JSON
          python run.py generate --rows 4 --columns 6 --seed 42

          # ASCII preview with extra loops
          python run.py preview --rows 5 --columns 5 --density 0.3 --seed dungeon
        """
    )

    parser = argparse.ArgumentParser(
        prog="Roomgrid",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Roomgrid Layout Server {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the Socket.IO web server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the real-time Flask/Socket.IO layout server",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a layout set and print it as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_layout_args(gen_parser)
    gen_parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    gen_parser.set_defaults(command="generate")

    preview_parser = subparsers.add_parser(
        "preview",
        help="Generate a layout set and print an ASCII map of each layout",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_layout_args(preview_parser)
    preview_parser.set_defaults(command="preview")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> LayoutConfig:
    """Env-derived config with any CLI flags layered on top."""
    cfg = LayoutConfig.from_env()
    for attr, flag in (("rows", "rows"), ("columns", "columns"), ("spacing", "spacing"),
                       ("density", "density"), ("layout_count", "count")):
        val = getattr(args, flag, None)
        if val is not None:
            setattr(cfg, attr, val)
    if getattr(args, "seed", None) is not None:
        cfg.seed = coerce_seed(args.seed)
    return cfg.validate()


def _error(msg: str) -> None:
    prefix = f"{Fore.RED}[ERROR]{Style.RESET_ALL}" if _COLOR_ENABLED else "[ERROR]"
    print(f"{prefix} {msg}", file=sys.stderr)


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    if mode in ("generate", "preview"):
        from roomgrid.logging_utils import set_output

        # stdout carries the JSON / map; log lines go to stderr
        set_output(sys.stderr)
        try:
            layout_set = LayoutSet.from_config(build_config(args))
        except ConfigurationError as e:
            _error(f"invalid configuration: {e}")
            return 2
        finally:
            set_output(None)
        if mode == "generate":
            payload = {
                "root_seed": layout_set.root_seed,
                "active_index": layout_set.active_index,
                "layouts": [layout.to_dict() for layout in layout_set],
            }
            print(json.dumps(payload, indent=args.indent))
        else:
            print("\n\n".join(render_ascii(layout) for layout in layout_set))
        return 0

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}Roomgrid Layout Server{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "Roomgrid Layout Server"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    print(
        "\n".join(
            [
                divider,
                f"  {title}",
                divider,
                f"  {label('Host:'):12} {value(host)}",
                f"  {label('Port:'):12} {value(port)}",
                f"  {label('Debug:'):12} {value('YES' if debug else 'NO')}",
                divider,
                "",
            ]
        )
    )

    from roomgrid.logging_utils import log
    from roomgrid.server import start_server

    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def _console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
