# scripts/setup/init_db.py
"""
Initialize database — creates all tables and opens the parking registry.
Run once before first launch, or with --reset to start from an empty lot.
Usage: python scripts/setup/init_db.py [--reset] [--capacity N]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from parking_tracker.database import create_tables, engine, SessionLocal
from parking_tracker.config import settings
from parking_tracker.services.persistence import clear_snapshot, open_registry
from sqlalchemy import text


def main():
    parser = argparse.ArgumentParser(description="Create tables and initialise the parking snapshot")
    parser.add_argument("--reset", action="store_true", help="discard the stored snapshot first")
    parser.add_argument("--capacity", type=int, default=settings.DEFAULT_CAPACITY,
                        help="spots to create when no snapshot exists")
    args = parser.parse_args()

    print("🗄️  Parking Tracker DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ Tables created")

    db = SessionLocal()
    try:
        if args.reset:
            removed = clear_snapshot(db)
            print(f"🧹 Snapshot '{settings.SNAPSHOT_SLOT}' {'removed' if removed else 'was not present'}")
        registry = open_registry(db, args.capacity)
    finally:
        db.close()

    print(f"\n🅿️  Slot '{settings.SNAPSHOT_SLOT}': {registry.total_spots}/{registry.capacity} spots, "
          f"{registry.available_count} available")
    for spot in registry.spots:
        if spot.occupied:
            print(f"   🚗 {spot.label}: {spot.vehicle_number} since {spot.entry_time:%Y-%m-%d %H:%M}")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn parking_tracker.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
