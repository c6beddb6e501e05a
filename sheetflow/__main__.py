"""sheetflow CLI entry point.

Allows running via `python -m sheetflow` and provides the console script
defined in `pyproject.toml`.

Usage:
    sheetflow [FILE]           Edit FILE in the paginated editor
    sheetflow --pages FILE     Print the computed page breaks of FILE
    sheetflow --version
"""

from __future__ import annotations

import importlib.metadata
import logging
import os
import sys
from typing import List, Optional


def get_version_string() -> str:
    try:
        return importlib.metadata.version("sheetflow")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def print_page_report(filename: str) -> int:
    """Paginate a file headlessly and print one line per break."""
    from .model import Document
    from .pagination import paginate
    from .planner import Side
    from .settings_persistence import get_persistence

    try:
        with open(filename, 'r', encoding='utf-8') as f:
            document = Document.from_text(f.read())
    except OSError as e:
        print(f"Cannot read {filename}: {e}", file=sys.stderr)
        return 1

    config = get_persistence().load_page_config(filename)
    plan, _ = paginate(document, config)
    print(f"{plan.page_count} page(s)")
    for page_number, descriptor in enumerate(plan.breaks, start=2):
        if descriptor.side is Side.AFTER:
            paragraph, char = document.resolve(descriptor.split_position)
        else:
            paragraph, char = document.node_at(descriptor.split_position).index, 0
        print(
            f"Page {page_number}: {descriptor.side.value} position "
            f"{descriptor.split_position} (paragraph {paragraph + 1}, column {char + 1}), "
            f"spacer {descriptor.spacer_height:g}px"
        )
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if os.environ.get("SHEETFLOW_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, filename="sheetflow.log")

    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] == "--pages":
        if len(args) < 2:
            print("Usage: sheetflow --pages FILE", file=sys.stderr)
            sys.exit(2)
        sys.exit(print_page_report(args[1]))

    # Lazy import to avoid importing UI deps for --version and --pages
    from .textual_app import main as run_app
    run_app(args[0] if args else None)


if __name__ == "__main__":  # pragma: no cover
    main()
