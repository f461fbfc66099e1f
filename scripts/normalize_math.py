#!/usr/bin/env python3
"""Normalize bracket math and repair LaTeX in markdown files.

Runs the same normalizer the API applies to model answers, so saved answers
or notes can be fixed in place.

Usage:
    # One or more files
    python scripts/normalize_math.py answer.md notes.md

    # Every .md file under a directory
    python scripts/normalize_math.py --dir ./exports

    # Dry run (show what would change without modifying files)
    python scripts/normalize_math.py --dir ./exports --dry-run
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from qurse.rendering import normalize


def first_change(original: str, converted: str) -> str:
    """Describe the first differing line of two texts."""
    orig_lines = original.split("\n")
    conv_lines = converted.split("\n")
    for i, (orig, conv) in enumerate(zip(orig_lines, conv_lines)):
        if orig != conv:
            return f"  Line {i + 1}:\n    - {orig[:100]}\n    + {conv[:100]}"
    if len(orig_lines) != len(conv_lines):
        return f"  Line count: {len(orig_lines)} -> {len(conv_lines)}"
    return ""


def process_file(file_path: Path, dry_run: bool = False) -> Tuple[bool, str]:
    """Normalize a single markdown file.

    Args:
        file_path: Path to the markdown file
        dry_run: If True, don't write changes

    Returns:
        Tuple of (was_modified, sample_diff)
    """
    original = file_path.read_text(encoding="utf-8")
    converted = normalize(original)

    if original == converted:
        return False, ""

    if not dry_run:
        file_path.write_text(converted, encoding="utf-8")

    return True, first_change(original, converted)


def collect_files(files: List[Path], directory: Optional[Path] = None) -> List[Path]:
    found = list(files)
    if directory is not None:
        found.extend(sorted(directory.rglob("*.md")))
    return found


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Normalize bracket math and repair LaTeX in markdown files"
    )
    parser.add_argument("files", nargs="*", type=Path, help="Markdown files to process")
    parser.add_argument(
        "--dir",
        type=Path,
        help="Process every .md file under this directory",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without modifying files",
    )
    args = parser.parse_args(argv)

    if not args.files and args.dir is None:
        parser.error("give at least one file or --dir")

    if args.dir is not None and not args.dir.is_dir():
        print(f"Error: Directory not found: {args.dir}")
        return 1

    missing = [f for f in args.files if not f.is_file()]
    if missing:
        print(f"Error: File not found: {missing[0]}")
        return 1

    md_files = collect_files(args.files, args.dir)
    action = "Would modify" if args.dry_run else "Modified"

    modified_count = 0
    for file_path in md_files:
        modified, sample_diff = process_file(file_path, dry_run=args.dry_run)
        if modified:
            modified_count += 1
            print(f"{action}: {file_path}")
            if sample_diff:
                print(sample_diff)

    print(f"\n{action} {modified_count} of {len(md_files)} files")
    return 0


if __name__ == "__main__":
    sys.exit(main())
