#!/usr/bin/env python3
"""
Populate the database with sample users, posts and gear.

- Deletes all existing users, posts and gear first.
- Uses DATABASE_URL from .env (or environment), like the API server.

Usage:
    python scripts/seed.py
"""

import logging

from portfolio.database import Base, SessionLocal, engine
from portfolio.seed import SAMPLE_USERS, seed_database

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        counts = seed_database(db)
    print("Database seeded successfully!")  # noqa: T201
    for name, count in counts.items():
        print(f"   {name}: {count}")  # noqa: T201
    admin = SAMPLE_USERS[0]
    print(f"\nLogin with {admin['email']} / {admin['password']}")  # noqa: T201
    print("Remember to change the password after first login!")  # noqa: T201


if __name__ == "__main__":
    main()
