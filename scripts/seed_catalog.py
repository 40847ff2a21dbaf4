"""Seed the catalog blob with the default functions or an import file.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --file functions.xlsx --replace
"""

from __future__ import annotations

import argparse
from pathlib import Path

from funcaudit.audit.default_catalog import DEFAULT_CATALOG
from funcaudit.core.config import AppSettings
from funcaudit.core.ids import RandomIdGenerator
from funcaudit.core.protocols import IStateRepository
from funcaudit.ingestion.file_parser import load_catalog_document
from funcaudit.ingestion.normalizer import FunctionNormalizer
from funcaudit.models.function_entry import FunctionEntry
from funcaudit.persistence import create_persistence


def load_entries(path: Path | None, normalizer: FunctionNormalizer) -> list[FunctionEntry]:
    """Entries from an import file, or the built-in sample catalog."""
    if path is None:
        return list(DEFAULT_CATALOG)
    return normalizer.normalize(load_catalog_document(path.read_bytes(), path.name))


def seed_catalog(repository: IStateRepository, entries: list[FunctionEntry], replace: bool = False) -> int:
    """Write entries to the catalog blob. Existing ids are skipped unless ``replace``.

    Returns the number of entries written.
    """
    existing, _ = repository.load()
    if replace or existing is None:
        repository.save_catalog(entries)
        print(f"  Wrote {len(entries)} functions")
        return len(entries)

    known = {e.id for e in existing}
    fresh = [e for e in entries if e.id not in known]
    skipped = len(entries) - len(fresh)
    if skipped:
        print(f"  {skipped} functions already present, skipping")
    repository.save_catalog(existing + fresh)
    print(f"  Appended {len(fresh)} functions")
    return len(fresh)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the app function catalog")
    parser.add_argument("--file", type=Path, default=None, help="Catalog file (.json, .xlsx, .csv, .html)")
    parser.add_argument("--replace", action="store_true", help="Overwrite the stored catalog")
    args = parser.parse_args()

    settings = AppSettings()
    repository = create_persistence(settings)
    normalizer = FunctionNormalizer(RandomIdGenerator())

    print(f"Seeding catalog ({settings.store.backend} store)...")
    seed_catalog(repository, load_entries(args.file, normalizer), replace=args.replace)
    print("Done!")


if __name__ == "__main__":
    main()
