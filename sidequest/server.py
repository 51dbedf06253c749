"""Entry point of the Sidequest server."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

BANNER = "Sidequest Server "


def _build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(prog="sidequest-server", description="Sidequest server.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse the command line, print the server banner and return the exit status."""
    parser = _build_parser()
    parser.parse_args(list(argv) if argv is not None else sys.argv[1:])
    sys.stdout.write(BANNER + "\n")
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())