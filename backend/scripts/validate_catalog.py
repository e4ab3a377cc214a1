"""
Validate the catalog CSV files before deploying them.
Loads packages and hospitals, reports rejected rows and a short summary.
Run: python scripts/validate_catalog.py [packages.csv] [hospitals.csv] [--strict]
"""

import os
import sys

# Add parent directory to path for package imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from travel_assist.catalog import engine
from travel_assist.catalog.errors import IngestionError
from travel_assist.core.config import settings
from travel_assist.ingestion.csv_loader import load_hospitals, load_packages


def main():
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    strict = "--strict" in sys.argv
    packages_path = args[0] if len(args) > 0 else settings.packages_csv_path
    hospitals_path = args[1] if len(args) > 1 else settings.hospitals_csv_path

    print(f"Packages:  {packages_path}")
    print(f"Hospitals: {hospitals_path}")
    print(f"Mode:      {'strict' if strict else 'lenient'}")

    try:
        packages = load_packages(packages_path, strict=strict)
        hospitals = load_hospitals(hospitals_path, strict=strict)
    except IngestionError as e:
        print(f"\nFAILED: {e}")
        return 1

    summary = engine.facets(packages)
    print(f"\nLoaded {len(packages)} packages, {len(hospitals)} hospitals")
    print(f"  Categories:     {', '.join(summary['categories'])}")
    print(f"  Seasons:        {', '.join(summary['seasons'])}")
    print(f"  Accessibility:  {', '.join(summary['accessibility_levels'])}")
    print(f"  Countries:      {len(summary['countries'])}")
    if packages:
        print(f"  Price span:     ${summary['price_min']:,.2f} - ${summary['price_max']:,.2f}")

    package_ids = {p.id for p in packages}
    orphans = [h for h in hospitals if h.package_id not in package_ids]
    if orphans:
        print(f"\n  [WARN] {len(orphans)} hospitals reference unknown packages:")
        for h in orphans:
            print(f"    {h.id} -> package {h.package_id}")

    without_hospital = [p for p in packages if not engine.nearby_hospitals(hospitals, p.id)]
    if without_hospital:
        print(f"\n  [WARN] {len(without_hospital)} packages have no registered hospital:")
        for p in without_hospital:
            print(f"    {p.id} {p.name}")

    print("\nDone.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
