"""Command-line interface for the autolayout daemon."""

import argparse
from typing import List, Optional

DESCRIPTION = """\
Sway autolayout daemon.

Keeps one wide main column per workspace and docks further windows beside it.
"""

ON_EXIT_HELP = """\
Sway command run when the daemon exits. Use it to undo settings changed while
it ran, e.g. '[tiling] opacity 1' to reset the opacity of all tiling windows.
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="sway-autolayout",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-e", "--on-exit",
        dest="on_exit",
        default="",
        metavar="COMMAND",
        help=ON_EXIT_HELP,
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments (sys.argv[1:] when argv is None)."""
    return build_parser().parse_args(argv)
