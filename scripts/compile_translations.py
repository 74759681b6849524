#!/usr/bin/env python3
"""Compile translations/<lang>/LC_MESSAGES/*.po into .mo files with polib."""
from __future__ import annotations

import argparse
import datetime as dt
import sys
from pathlib import Path
from typing import List

import polib

DEFAULT_ROOT = Path(__file__).resolve().parents[1] / "translations"


def update_metadata(po: polib.POFile, language: str) -> None:
    now = dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%d %H:%M+0000")
    po.metadata["PO-Revision-Date"] = now
    po.metadata["Language"] = language
    po.metadata.setdefault("Plural-Forms", "nplurals=1; plural=0;")


def untranslated_entries(po: polib.POFile) -> List[str]:
    return [entry.msgid for entry in po.untranslated_entries() if entry.msgid]


def compile_catalog(source: Path) -> List[str]:
    """Write the .mo next to `source`; returns the untranslated msgids."""
    language = source.parent.parent.name
    po = polib.pofile(str(source))
    update_metadata(po, language)
    po.save_as_mofile(str(source.with_suffix(".mo")))
    return untranslated_entries(po)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--root", type=Path, default=DEFAULT_ROOT, help="translations root directory")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="exit non-zero when a catalog has untranslated entries",
    )
    args = parser.parse_args()

    sources = sorted(args.root.glob("*/LC_MESSAGES/*.po"))
    if not sources:
        raise SystemExit(f"No .po files found under {args.root}")
    missing_total = 0
    for source in sources:
        missing = compile_catalog(source)
        missing_total += len(missing)
        print(f"Compiled {source} ({len(missing)} untranslated)")
        for msgid in missing:
            print(f"  - {msgid}")
    if args.strict and missing_total:
        sys.exit(1)


if __name__ == "__main__":
    main()
