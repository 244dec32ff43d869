"""Prowl CLI — prowl dev / prowl fingerprint.

Entry point for the ``prowl`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the prowl CLI."""
    parser = argparse.ArgumentParser(
        prog="prowl",
        description="Content-aware live-reload dev server.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # prowl dev
    dev_parser = subparsers.add_parser(
        "dev",
        help="Watch sources and live-reload connected browsers",
    )
    dev_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    dev_parser.add_argument("--host", default=None, help="Bind address")
    dev_parser.add_argument("--port", type=int, default=None, help="Bind port")
    dev_parser.add_argument("--src", dest="src_dir", default=None, help="Watched directory")
    dev_parser.add_argument("--out", dest="out_dir", default=None, help="Output directory")
    dev_parser.add_argument(
        "--entry", dest="entry_point", default=None, help="Entry point (e.g. index or index.jsx)",
    )
    dev_parser.add_argument(
        "--typescript", action="store_true", default=None, help="Prefer typed entry variants",
    )
    dev_parser.add_argument(
        "--debounce-ms", type=int, default=None, help="Reload coalescing window",
    )

    # prowl fingerprint
    fp_parser = subparsers.add_parser(
        "fingerprint",
        help="Print the kind and normalized fingerprint of files",
    )
    fp_parser.add_argument("files", nargs="+", help="Files to fingerprint")

    return parser


def _get_version() -> str:
    """Get the package version."""
    from prowl import __version__

    return __version__


def _fingerprint(files: list[str]) -> int:
    from prowl.content.hasher import fingerprint
    from prowl.content.kinds import file_kind

    status = 0
    for name in files:
        path = Path(name)
        kind = file_kind(path)
        try:
            digest = fingerprint(path.read_bytes(), kind)
        except OSError as exc:
            print(f"{name}: {exc}", file=sys.stderr)
            status = 1
            continue
        print(f"{digest}  {kind:<9}  {name}")
    return status


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "fingerprint":
        sys.exit(_fingerprint(args.files))

    from prowl._errors import ConfigError
    from prowl.app import dev

    try:
        dev(
            root=args.root,
            host=args.host,
            port=args.port,
            src_dir=args.src_dir,
            out_dir=args.out_dir,
            entry_point=args.entry_point,
            typescript=args.typescript,
            debounce_ms=args.debounce_ms,
        )
    except ConfigError as exc:
        print(f"  Config error: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
