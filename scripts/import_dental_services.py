#!/usr/bin/env python3
"""Bulk-update dental services from a CSV export (matched by id)."""
from __future__ import annotations

import argparse
import json
from pathlib import Path

from clinic_admin.db import init_engine_once
from clinic_admin.services.dental_services_service import import_from_csv


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("csv_path", type=Path, help="CSV file with an id column plus service fields")
    parser.add_argument("--updated-by", default=None, help="employee id recorded as updated_by")
    args = parser.parse_args()

    init_engine_once()
    with args.csv_path.open("r", encoding="utf-8-sig", newline="") as handle:
        result = import_from_csv(handle, updated_by_id=args.updated_by)
    print(json.dumps(result, ensure_ascii=False, indent=2))
    if result["errors"]:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
