"""``netdef-check``: load network definition files and print located errors."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from netdef import __version__
from netdef.models.errors import NetworkDefinitionError
from netdef.parser.loader import TrackedLoader
from netdef.settings import Settings

logger = logging.getLogger("netdef.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netdef-check",
        description="Check YAML network definition files for errors.",
    )
    parser.add_argument("files", nargs="+", help="Definition files to check")
    parser.add_argument(
        "--error-code",
        action="store_true",
        help="Also print the numeric error code of each failure",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Check each file; return 0 if all load cleanly, 1 otherwise."""
    args = _build_parser().parse_args(argv)
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    loader = TrackedLoader(encoding=settings.context_encoding)

    failed = 0
    for name in args.files:
        try:
            loader.load(name)
        except NetworkDefinitionError as exc:
            failed += 1
            print(exc.error.message, file=sys.stderr)
            if args.error_code:
                print(f"error code: 0x{exc.error.error_code:016x}", file=sys.stderr)
        except OSError as exc:
            failed += 1
            print(f"{name}: {exc.strerror or exc}", file=sys.stderr)
        else:
            logger.debug("OK: %s", name)

    logger.info("Checked %d file(s), %d failed", len(args.files), failed)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
