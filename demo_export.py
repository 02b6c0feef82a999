#!/usr/bin/env python3
"""
Complete Pipeline Demo: Items → XML (3 dialects) → Items

Shows the full workflow:
1. Build an example menu with two actions
2. Export it in each dialect
3. Import the files back, renumbering on id conflicts
"""

import tempfile

from menuconf.config import Settings
from menuconf.conflicts import ResolutionPolicy
from menuconf.dialects import available_dialects
from menuconf.examples import build_example_menu
from menuconf.importer import Importer
from menuconf.logger import setup_logger
from menuconf.writer import export_to_buffer, export_tree


def main():
    settings = Settings(import_mode=ResolutionPolicy.RENUMBER, log_level="INFO")
    setup_logger(settings)

    menu = build_example_menu()

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Items → XML → Items")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Export to buffers
    # =========================================================================
    print("\n1. EXPORTING TO BUFFERS...")
    for dialect in available_dialects():
        print(f"\n{dialect.value}:")
        print("-" * 80)
        print(export_to_buffer(menu.children[0], dialect))

    with tempfile.TemporaryDirectory() as folder:
        # =====================================================================
        # STEP 2: Export to files
        # =====================================================================
        print("\n2. EXPORTING TO FILES...")
        paths = []
        for dialect in available_dialects():
            paths.extend(export_tree(menu, folder, dialect))
        for path in paths:
            print(f"   ✓ {path.name}")

        # =====================================================================
        # STEP 3: Import back
        # =====================================================================
        print("\n3. IMPORTING...")
        known = {item.id: item for item in menu.walk()}
        importer = Importer(settings, find_existing=known.get)
        for entry in importer.import_many(paths):
            if not entry.ok:
                print(f"   ✗ {entry.source}: {entry.error}")
                continue
            result = entry.result
            print(f"   ✓ {result.item.type_name} {result.item.id} "
                  f"({result.dialect.value}, {len(result.messages)} messages)")
            for message in result.messages:
                print(f"      - {message}")

    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
