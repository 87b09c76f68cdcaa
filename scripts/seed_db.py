"""
Seed script for the Saarthi state storage (mock JSON file or Firestore).

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured storage: python scripts/seed_db.py --apply
  - Force the mock JSON file even if Firebase is configured: python scripts/seed_db.py --apply --force-mock

Behavior:
  - Builds the engine the same way the API does (storage picked from settings).
  - Dry run prints the demo reports that would be written.
  - --apply replaces reports, notices and karma with the demo data.
  - --apply exits non-zero if Firestore could not be initialised or a write fails.

NOTE: When applying to real Firestore, ensure `FIREBASE_CREDENTIALS_PATH` and `USE_MOCK_DB=false` are set in `.env`.
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from saarthi.core.settings import settings
from saarthi.services.engine import build_engine
from saarthi.services.state_storage import MemoryStateBackend


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write demo data instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force the mock JSON file even if Firebase is configured")
    args = parser.parse_args(argv)

    if args.force_mock:
        print("Forcing mock DB usage for this run.")
        # Settings reads .env only once at import, so overriding the attribute is enough
        settings.USE_MOCK_DB = True

    engine = build_engine()
    backend_name = engine.storage.backend.name
    print(f"Storage backend: {backend_name}")

    if not args.apply:
        for report in engine.sample_reports():
            print(f"Preparing: {report.title} [{report.status.value}] due {report.due_by.isoformat()}")
        print("Dry run complete. Re-run with --apply to write to DB.")
        return

    if backend_name == MemoryStateBackend.name:
        # Firestore failed to initialise; seeding memory would be lost on exit
        print("Firestore could not be initialised; refusing to seed in-memory storage.")
        print("Check FIREBASE_CREDENTIALS_PATH, or re-run with --force-mock.")
        sys.exit(1)

    reports = engine.seed_demo_data()
    for report in reports:
        print(f"Wrote: {report.id} {report.title}")

    if engine.storage.degraded:
        print("Storage degraded during seeding; data was NOT persisted.")
        sys.exit(1)
    print("Seeding completed.")


if __name__ == "__main__":
    main()
