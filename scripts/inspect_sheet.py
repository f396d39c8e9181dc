import sys
import os
import logging

# Add project root to sys.path
sys.path.append(os.getcwd())

from sources import SpreadsheetRowSource


def inspect_sheet(path, sheet_name, key_column_names=None):
    source = SpreadsheetRowSource(path, sheet_name, key_column_names=key_column_names)
    rows = []
    with source:
        model = source.get_model()
        print(f"Source: {source!r}")
        print(f"Columns: {model.column_names}")
        print(f"Key columns: {model.key_column_names}")
        print("-" * 20)
        for row in source:
            print(f"{source.get_last_index():>5}: {row}")
            rows.append(row)
    print(f"\nTotal rows: {len(rows)}")
    return rows


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if len(sys.argv) < 3:
        print("usage: inspect_sheet.py <file> <sheet> [key column ...]")
        sys.exit(2)
    keys = sys.argv[3:] or None
    inspect_sheet(sys.argv[1], sys.argv[2], keys)
