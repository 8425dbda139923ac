#!/usr/bin/env python3
"""
Create the schema and seed the first admin account plus base categories

Usage:
    cd backend
    python scripts/setup/seed.py --admin-email admin@doctorplanet.com --admin-password 'S3cure-pass'

Options:
    --admin-email       Admin login (created, or promoted to ADMIN if it exists)
    --admin-password    Password for a newly created admin (or SEED_ADMIN_PASSWORD)
    --skip-categories   Only create tables and the admin
"""

import argparse
import os
import sys
from pathlib import Path

# Add backend to path
BACKEND_DIR = Path(__file__).parent.parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from dotenv import load_dotenv

load_dotenv(BACKEND_DIR / '.env')

from app.core.auth import ROLE_ADMIN, hash_password
from app.core.database import SessionLocal, create_all_tables
from app.domain.user import password_error
from app.models import Category, User

CATEGORIES = [
    {
        "name": "Medical Clothes",
        "slug": "medical-clothes",
        "description": "Professional medical uniforms, scrubs, lab coats, and more",
    },
    {
        "name": "Medical Shoes",
        "slug": "medical-shoes",
        "description": "Comfortable and durable footwear for healthcare professionals",
    },
    {
        "name": "Medical Equipment",
        "slug": "medical-equipment",
        "description": "Essential medical tools and equipment for professionals",
    },
]


def seed_admin(db, email: str, password: str):
    user = db.query(User).filter(User.email == email).first()
    if user is not None:
        user.role = ROLE_ADMIN
        user.is_active = True
        print(f"✅ Promoted existing user: {email} (now ADMIN)")
        return

    error = password_error(password)
    if error:
        raise SystemExit(f"❌ {error}")

    db.add(User(
        email=email,
        name="Admin",
        password_hash=hash_password(password),
        role=ROLE_ADMIN,
        is_active=True,
    ))
    print(f"✅ Created admin: {email}")


def seed_categories(db):
    for data in CATEGORIES:
        if db.query(Category).filter(Category.slug == data["slug"]).first() is not None:
            print(f"   - {data['name']} already exists")
            continue
        db.add(Category(**data))
        print(f"✅ Created category: {data['name']}")


def main():
    parser = argparse.ArgumentParser(description='Create tables and seed initial data')
    parser.add_argument('--admin-email', default='admin@doctorplanet.com')
    parser.add_argument('--admin-password', default=os.getenv('SEED_ADMIN_PASSWORD', ''))
    parser.add_argument('--skip-categories', action='store_true', help='Do not create the base categories')
    args = parser.parse_args()

    print("🔧 Creating tables...")
    create_all_tables()

    db = SessionLocal()
    try:
        seed_admin(db, args.admin_email.strip().lower(), args.admin_password)
        if not args.skip_categories:
            seed_categories(db)
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print("\n🎉 Seed complete")


if __name__ == "__main__":
    main()
