"""Build the bulk phonetic dataset (phonetics.json) from a CSV.

Usage:
    cd backend
    python -m scripts.build_phonetics --csv data/phonetics.csv --out data/phonetics.json

Expected CSV columns:
    word, us, uk, examples        (examples separated by "|")

The output is the ``{"word": {"US": ..., "UK": ..., "examples": [...]}}``
table served next to the letter shards and read by the API.
"""

import argparse
import csv
import json
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CSV = BACKEND_DIR / "data" / "phonetics.csv"
DEFAULT_OUT = BACKEND_DIR / "data" / "phonetics.json"

REQUIRED_COLUMNS = {"word", "us", "uk"}
MAX_EXAMPLES = 5


def build(csv_path: Path) -> tuple[dict[str, dict], list[str], list[str]]:
    """Read *csv_path* and return (table, errors, warnings)."""
    errors: list[str] = []
    warnings: list[str] = []
    table: dict[str, dict] = {}

    with open(csv_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        # Normalise header names (strip whitespace, lower-case)
        reader.fieldnames = [h.strip().lower() for h in reader.fieldnames or []]
        missing_cols = REQUIRED_COLUMNS - set(reader.fieldnames)
        if missing_cols:
            errors.append(f"CSV missing columns: {sorted(missing_cols)}")
            return table, errors, warnings

        for i, row in enumerate(reader, start=2):  # row 2 = first data row
            word = (row.get("word") or "").strip().casefold()
            if not word:
                errors.append(f"Row {i}: empty word")
                continue
            if word in table:
                warnings.append(f"Row {i} ({word}): duplicate word, keeping the first")
                continue

            us = (row.get("us") or "").strip() or None
            uk = (row.get("uk") or "").strip() or None
            if not us and not uk:
                warnings.append(f"Row {i} ({word}): no transcription for either region")

            examples = [e.strip() for e in (row.get("examples") or "").split("|") if e.strip()]
            if len(examples) > MAX_EXAMPLES:
                warnings.append(f"Row {i} ({word}): {len(examples)} examples, keeping {MAX_EXAMPLES}")
                examples = examples[:MAX_EXAMPLES]

            table[word] = {"US": us, "UK": uk, "examples": examples}

    if not table and not errors:
        errors.append("CSV is empty")
    return table, errors, warnings


def main():
    parser = argparse.ArgumentParser(description="Build phonetics.json from a CSV")
    parser.add_argument("--csv", type=Path, default=DEFAULT_CSV, help="Path to phonetics CSV")
    parser.add_argument("--out", type=Path, default=DEFAULT_OUT, help="Output JSON path")
    parser.add_argument("--dry-run", action="store_true", help="Validate only, don't write")
    args = parser.parse_args()

    if not args.csv.is_file():
        print(f"[FAIL] CSV file not found: {args.csv}")
        sys.exit(1)

    table, errors, warnings = build(args.csv)

    if warnings:
        print(f"[WARN] {len(warnings)} warning(s):")
        for w in warnings[:20]:
            print(f"  - {w}")
        if len(warnings) > 20:
            print(f"  ... and {len(warnings) - 20} more")

    if errors:
        print(f"[FAIL] {len(errors)} error(s):")
        for e in errors:
            print(f"  - {e}")
        sys.exit(1)

    if args.dry_run:
        print(f"[OK] {len(table)} words validated (dry run, nothing written)")
        return

    args.out.parent.mkdir(parents=True, exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(table, f, ensure_ascii=False, sort_keys=True)
    print(f"[OK] Wrote {len(table)} words to {args.out}")


if __name__ == "__main__":
    main()
