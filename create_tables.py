# create_tables.py
import argparse

from supervision.database import Base, SessionLocal, engine
from supervision.models import Admin
import supervision.models  # noqa: F401  registers every table on Base.metadata


def create_tables(drop: bool = False):
    """Create all tables, optionally dropping the existing ones first"""
    try:
        if drop:
            Base.metadata.drop_all(bind=engine)
            print("Existing tables dropped")
        Base.metadata.create_all(bind=engine)
        print("✅ All tables created successfully!")
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise


def create_default_admin(email: str = "admin@example.com", name: str = "System Administrator"):
    """Create the first admin account so the admin endpoints can be reached"""
    db = SessionLocal()
    try:
        if db.query(Admin).filter(Admin.email == email).first():
            print("ℹ️  Admin user already exists")
            return
        db.add(Admin(email=email, name=name))
        db.commit()
        print("✅ Default admin user created!")
        print(f"   Email: {email}")
    except Exception as e:
        db.rollback()
        print(f"❌ Error creating default admin: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the supervision tracker tables")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--admin-email", default="admin@example.com")
    args = parser.parse_args()

    create_tables(drop=args.drop)
    create_default_admin(args.admin_email)
