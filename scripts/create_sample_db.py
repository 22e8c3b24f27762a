#!/usr/bin/env python
"""
Write the seeded hospital database to data/hospital.sqlite.

Point LLAMASQL_DB_PATH at the file to use it instead of the in-memory store.
Run with: python -m scripts.create_sample_db
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from llamasql.sql.executor import SQLiteStore


def create_sample_database():
    db_path = ROOT / "data" / "hospital.sqlite"
    db_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"Creating sample database at: {db_path}")

    store = SQLiteStore(str(db_path))
    store.seed()
    counts = store.table_counts()
    store.close()

    for table, count in counts.items():
        print(f"   {table}: {count} rows")
    print(f"✅ Database: {db_path}")
    print(f"   export LLAMASQL_DB_PATH={db_path}")


if __name__ == "__main__":
    create_sample_database()
