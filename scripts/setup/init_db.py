"""
Initialize database — creates all tables, optionally seeds an admin user and demo cars.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--admin-email admin@example.com] [--demo-cars]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import SessionLocal, create_tables, engine
from app.config import settings
from app.models.user import User
from app.models.vehicle import Vehicle
from app.services.user_service import create_user
from app.services.vehicle_service import create_vehicle
from sqlalchemy import inspect, text

DEMO_CARS = [
    ("Toyota", "Corolla", 45.0, 3),
    ("Volkswagen", "Golf", 50.0, 2),
    ("BMW", "X5", 120.0, 1),
]


def seed(admin_email, demo_cars):
    db = SessionLocal()
    try:
        if admin_email and not db.query(User).filter(User.email == admin_email).first():
            admin = create_user(db, "Administrator", admin_email, is_admin=True)
            print(f"👤 Admin user created (id={admin.id}) — send X-User-Id: {admin.id}")
        if demo_cars and db.query(Vehicle).count() == 0:
            for brand, model, price, quantity in DEMO_CARS:
                create_vehicle(db, brand, model, price, quantity)
            print(f"🚗 {len(DEMO_CARS)} demo cars added")
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create booking tables")
    parser.add_argument("--admin-email", help="Create an admin user with this email")
    parser.add_argument("--demo-cars", action="store_true", help="Add a few cars if the fleet is empty")
    args = parser.parse_args()

    print("🗄️  Car Rental DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running and DATABASE_URL is set.")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables ready ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    seed(args.admin_email, args.demo_cars)

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host {settings.BACKEND_HOST} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
