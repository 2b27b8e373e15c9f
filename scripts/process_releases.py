#!/usr/bin/env python3
"""
Run the release processor once (manual trigger, or cron without Celery beat).
Run from the project root: python -m scripts.process_releases [--limit N]
or: PYTHONPATH=. python scripts/process_releases.py
"""
import argparse
import os
import sys

# project root on PYTHONPATH
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from premium_gate.core.config import settings
from premium_gate.core.logging import configure_logging
from premium_gate.db.session import SessionLocal
from premium_gate.services.access.cache import AccessDecisionCache
from premium_gate.services.releases.processor import ReleaseProcessor
from premium_gate.storage.sql import SqlContentStore


def main():
    parser = argparse.ArgumentParser(description="Release premium content whose date has passed.")
    parser.add_argument("--limit", type=int, default=None, help="max items this run")
    args = parser.parse_args()

    configure_logging()
    db = SessionLocal()
    try:
        cache = AccessDecisionCache() if settings.access_cache_enabled else None
        result = ReleaseProcessor(SqlContentStore(db), cache=cache).process_due(limit=args.limit)
    finally:
        db.close()

    print(f"Released: {result.released_count}")
    for error in result.errors:
        print(f"  {error.content_id}: {error.message}")
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
