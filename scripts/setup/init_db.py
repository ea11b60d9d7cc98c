# scripts/setup/init_db.py
"""
Initialize database: creates all tables, optionally seeds sample departments.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import argparse
from datetime import datetime
from sqlalchemy import inspect, text
from app.database import create_tables, engine, SessionLocal
from app.config import settings
from app.models.department import Department
from app.models.division import Division

SAMPLE_DEPARTMENTS = {
    "Registrar of Births, Deaths and Marriages": ["Birth Certificates", "Marriage Registration"],
    "Land Registry": ["Deeds", "Surveys"],
    "Social Services": ["Elderly Care", "Disability Support"],
}


def seed_departments():
    db = SessionLocal()
    try:
        now = datetime.now()
        for dept_name, divisions in SAMPLE_DEPARTMENTS.items():
            dept = db.query(Department).filter(Department.name == dept_name).first()
            if dept:
                print(f"   • {dept_name} (exists)")
                continue
            dept = Department(name=dept_name, status="active", created_at=now)
            db.add(dept)
            db.flush()
            for div_name in divisions:
                db.add(Division(department_id=dept.id, name=div_name, status="active", created_at=now))
            print(f"   ✓ {dept_name} ({len(divisions)} divisions)")
        db.commit()
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create registry tables")
    parser.add_argument("--seed", action="store_true", help="Insert sample departments and divisions")
    args = parser.parse_args()

    print("🗄️  Visitor Registry DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {engine.url.render_as_string(hide_password=True)}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nCheck DATABASE_URL in .env and that the database server is running.")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    print("✅ All tables created")

    if args.seed:
        print("\n🌱 Seeding sample departments...")
        seed_departments()

    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
