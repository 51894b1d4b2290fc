"""Entry point for the mdtabs CLI."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from . import __version__
from .constants import MODES, PERSISTENCE_KEY, STATE_FILE_NAME, mdtabs_home
from .log import configure_file_logging, logger


def _reset_session(home: Path) -> None:
    """Forget the persisted tab session (preferences are kept)."""
    from .persistence import KeyValueStore

    store = KeyValueStore(home / STATE_FILE_NAME)
    try:
        store.delete(PERSISTENCE_KEY)
    except OSError as exc:
        print(f"Could not reset session state: {exc}", file=sys.stderr)
        sys.exit(1)
    print(f"Cleared saved tabs in {home / STATE_FILE_NAME}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdtabs", description="Tabbed markdown editor for the terminal"
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"mdtabs {__version__}",
    )
    parser.add_argument(
        "--mode",
        "-m",
        choices=MODES,
        help="Layout to start in (default: from preferences)",
    )
    parser.add_argument(
        "--state-dir",
        type=Path,
        help="Directory for preferences and session state (default: ~/.mdtabs)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Forget previously open tabs and exit",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=os.environ.get("MDTABS_LOG") or None,
        help="Write a debug log to this file (or set $MDTABS_LOG)",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Markdown files to open",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run mdtabs."""
    args = build_parser().parse_args(argv)

    if args.state_dir:
        os.environ["MDTABS_HOME"] = str(args.state_dir.expanduser())
    home = mdtabs_home()

    if args.log_file:
        configure_file_logging(Path(args.log_file))

    if args.reset:
        _reset_session(home)
        return

    try:
        from mdtabs.app import run_app

        run_app(files=args.files, mode=args.mode, home=home)
    except (KeyboardInterrupt, SystemExit):
        pass
    except Exception:
        logger.debug("Fatal error in mdtabs", exc_info=True)
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
