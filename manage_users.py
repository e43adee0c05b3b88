"""
USER PROVISIONING HELPER
Create accounts and seed content in the configured database.

Usage:
    python manage_users.py --create <username> <password> [--admin]
    python manage_users.py --list
    python manage_users.py --seed
"""

import sys

from portfolio.config import get_settings
from portfolio.database import connect_with_retry, init_db, make_engine
from portfolio.schemas import UserCreate
from portfolio.services.seed import seed_admin, seed_sample_blogs
from portfolio.storage.sql import SqlStorage


def open_storage():
    settings = get_settings()
    if not settings.database_url:
        print("DATABASE_URL is not set.")
        sys.exit(1)

    engine = make_engine(settings.database_url)
    connect_with_retry(engine, settings.db_connect_retries, settings.db_connect_backoff)
    init_db(engine)
    return SqlStorage(engine), settings


def create_user(storage, username, password, is_admin=False):
    """Create a new user"""
    if storage.get_user_by_username(username):
        print(f"User '{username}' already exists!")
        return False

    if len(username) < 3 or len(password) < 6:
        print("Username needs at least 3 characters and password at least 6.")
        return False

    user = storage.create_user(UserCreate(username=username, password=password, is_admin=is_admin))

    print("User created successfully!")
    print(f"   Id:       {user.id}")
    print(f"   Username: {user.username}")
    print(f"   Admin:    {user.is_admin}")
    return True


def list_users(storage):
    """List all users"""
    users = storage.list_users()

    if not users:
        print("No users found.")
        return

    print(f"\n{'Id':<6} {'Username':<30} {'Admin':<8} {'Created':<20}")
    print("-" * 66)
    for u in users:
        print(f"{u.id:<6} {u.username:<30} {'yes' if u.is_admin else 'no':<8} {u.created_at.strftime('%Y-%m-%d %H:%M'):<20}")
    print()


def seed(storage, settings):
    """Create the admin from ADMIN_USERNAME/ADMIN_PASSWORD and the sample posts"""
    user = seed_admin(storage, settings)
    if user:
        print(f"Admin '{user.username}' created")
    created = seed_sample_blogs(storage)
    print(f"{created} sample blog post(s) created")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    command = sys.argv[1]

    if command == "--create":
        if len(sys.argv) < 4:
            print("Usage: python manage_users.py --create <username> <password> [--admin]")
            sys.exit(1)
        storage, _ = open_storage()
        ok = create_user(storage, sys.argv[2], sys.argv[3], is_admin="--admin" in sys.argv[4:])
        sys.exit(0 if ok else 1)

    elif command == "--list":
        storage, _ = open_storage()
        list_users(storage)

    elif command == "--seed":
        storage, settings = open_storage()
        seed(storage, settings)

    else:
        print(f"Unknown command: {command}")
        print(__doc__)
        sys.exit(1)
