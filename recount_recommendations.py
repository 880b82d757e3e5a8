#!/usr/bin/env python3
"""
Recompute every product's recommendationCount from the recommendations table.

Counters are kept in step by the API itself; this script repairs a
database whose counters drifted because rows were inserted or deleted
outside the API.  It reports how many products were corrected.

Usage:
    python recount_recommendations.py --db ./boycott_api/catalog.db
    python recount_recommendations.py --db ./boycott_api/catalog.db --dry-run
"""

import argparse
import asyncio
import os
import sqlite3
import sys

from boycott_api.app.core.config import settings
from boycott_api.app.core.logging_config import setup_logging
from boycott_api.app.services.product_service import ProductService


def count_drift(db_path: str) -> int:
    conn = sqlite3.connect(db_path)
    try:
        row = conn.execute(
            """
            SELECT COUNT(*) FROM products p
            WHERE p.recommendation_count != (
                SELECT COUNT(*) FROM recommendations r WHERE r.query_id = p.id
            )
            """
        ).fetchone()
        return row[0]
    finally:
        conn.close()


def main():
    ap = argparse.ArgumentParser(description="Reconcile product recommendation counters (SQLite).")
    ap.add_argument("--db", required=True, help="Path to SQLite DB file (e.g., ./boycott_api/catalog.db)")
    ap.add_argument("--dry-run", action="store_true", help="Only report how many products are out of step")
    args = ap.parse_args()

    if not os.path.exists(args.db):
        print(f"[!] DB not found: {args.db}", file=sys.stderr)
        sys.exit(1)

    db_path = os.path.abspath(args.db)
    if args.dry_run:
        print(f"[i] {count_drift(db_path)} product(s) with a wrong recommendationCount")
        return

    setup_logging()
    settings.database_url = db_path
    result = asyncio.run(ProductService.reconcile_counts())
    print(f"[✓] Checked {result.matchedCount} product(s), corrected {result.modifiedCount}")


if __name__ == "__main__":
    main()
