#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # From the project root with the virtualenv activated
    python scripts/seed_data.py

This script:
1. Connects to the database using BookHaven settings (DATABASE_URL)
2. Creates tables if they don't exist
3. Registers three demo users (alice, bob, charlie; password "123456")
   with profiles, favorite genres and the default lists
4. Mirrors a handful of books, shelves some and rates them

Running it twice is safe: existing users and books are kept.
"""

import sys
from datetime import date
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select
from sqlalchemy.orm import Session

from bookhaven.config import get_settings
from bookhaven.database import create_db_engine, create_session_factory, create_tables
from bookhaven.exceptions import ConflictError
from bookhaven.models import BookList, BookListEntry, User
from bookhaven.schemas.user import RegisterRequest
from bookhaven.services.auth import register_user
from bookhaven.services.catalog import upsert_book
from bookhaven.services.ratings import rate_book

DEMO_PASSWORD = "123456"

USERS = [
    {
        "username": "alice",
        "email": "alice@bookhaven.com",
        "birthdate": date(1995, 1, 15),
        "favorite_genres": ["Fantasy", "Science Fiction"],
    },
    {
        "username": "bob",
        "email": "bob@bookhaven.com",
        "birthdate": date(1990, 5, 20),
        "favorite_genres": ["Mystery", "History"],
    },
    {
        "username": "charlie",
        "email": "charlie@bookhaven.com",
        "birthdate": date(1998, 11, 30),
        "favorite_genres": ["Fiction", "Romance"],
    },
]

BOOKS = [
    {
        "id": "yl4dILkcqm4C",
        "title": "The Hobbit",
        "authors": "J.R.R. Tolkien",
        "categories": ["Fantasy", "Fiction"],
        "description": "Bilbo Baggins is swept into a quest to reclaim a dwarf kingdom.",
    },
    {
        "id": "B1hSG45JCX4C",
        "title": "Dune",
        "authors": "Frank Herbert",
        "categories": ["Science Fiction"],
        "description": "A desert planet, a noble family and the spice melange.",
    },
    {
        "id": "aWZzLPhY4o0C",
        "title": "Foundation",
        "authors": "Isaac Asimov",
        "categories": ["Science Fiction"],
        "description": "Hari Seldon plans to shorten the galaxy's coming dark age.",
    },
    {
        "id": "ZxrBAgAAQBAJ",
        "title": "Murder on the Orient Express",
        "authors": "Agatha Christie",
        "categories": ["Mystery", "Fiction"],
        "description": "Hercule Poirot investigates a murder aboard a snowbound train.",
    },
    {
        "id": "kotPYEqx7kMC",
        "title": "1984",
        "authors": "George Orwell",
        "categories": ["Fiction"],
        "description": "Winston Smith rebels against the Party's total surveillance.",
    },
    {
        "id": "s1gVAAAAYAAJ",
        "title": "Pride and Prejudice",
        "authors": "Jane Austen",
        "categories": ["Romance", "Fiction"],
        "description": "Elizabeth Bennet and Mr. Darcy overcome first impressions.",
    },
    {
        "id": "wrOQLV6xB-wC",
        "title": "A Short History of Nearly Everything",
        "authors": "Bill Bryson",
        "categories": ["Science", "History"],
        "description": "A tour of how we came to know what we know about the universe.",
    },
]

# (username, book id, stars)
RATINGS = [
    ("alice", "yl4dILkcqm4C", 5),
    ("alice", "B1hSG45JCX4C", 4),
    ("bob", "yl4dILkcqm4C", 4),
    ("bob", "ZxrBAgAAQBAJ", 5),
    ("charlie", "s1gVAAAAYAAJ", 5),
    ("charlie", "kotPYEqx7kMC", 4),
    ("charlie", "B1hSG45JCX4C", 5),
]

# (username, list name, book id)
SHELVED = [
    ("alice", "read", "yl4dILkcqm4C"),
    ("bob", "currently reading", "ZxrBAgAAQBAJ"),
    ("charlie", "want to read", "kotPYEqx7kMC"),
]


def create_users(db: Session) -> dict[str, User]:
    """Register demo users, reusing any that already exist."""
    print("Creating users...")
    users: dict[str, User] = {}
    for data in USERS:
        try:
            user = register_user(db, RegisterRequest(password=DEMO_PASSWORD, **data))
            print(f"  created {user.username} ({user.email})")
        except ConflictError:
            user = db.execute(
                select(User).where(User.username == data["username"])
            ).scalar_one()
            print(f"  exists  {user.username}")
        if user.profile is not None and not user.profile.bio:
            user.profile.bio = f"I'm {user.username}, and I love reading!"
        users[user.username] = user
    db.commit()
    return users


def create_books(db: Session) -> None:
    """Mirror the sample books."""
    print("Creating books...")
    for data in BOOKS:
        fields = {key: value for key, value in data.items() if key != "id"}
        upsert_book(db, data["id"], **fields)
    db.commit()
    print(f"Mirrored {len(BOOKS)} books.")


def shelve_books(db: Session, users: dict[str, User]) -> None:
    """Put a few books on default lists."""
    for username, list_name, book_id in SHELVED:
        book_list = db.execute(
            select(BookList).where(
                BookList.user_id == users[username].id,
                BookList.name == list_name,
            )
        ).scalar_one()
        exists = db.execute(
            select(BookListEntry.id).where(
                BookListEntry.book_list_id == book_list.id,
                BookListEntry.book_id == book_id,
            )
        ).scalar_one_or_none()
        if exists is None:
            db.add(BookListEntry(book_list_id=book_list.id, book_id=book_id))
    db.commit()


def rate_books(db: Session, users: dict[str, User]) -> None:
    """Rate books so averages and popular backfill have data."""
    for username, book_id, stars in RATINGS:
        rate_book(db, users[username], book_id, stars)


def seed_database() -> None:
    """Main function to seed the database."""
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    settings = get_settings()
    engine = create_db_engine(settings)
    create_tables(engine)

    db = create_session_factory(engine)()

    try:
        users = create_users(db)
        create_books(db)
        shelve_books(db, users)
        rate_books(db, users)

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {DEMO_PASSWORD})")
        print(f"  - Books: {len(BOOKS)}")
        print(f"  - Ratings: {len(RATINGS)}")
        print(f"\nYou can now access the API at http://localhost:{settings.port}")
        print(f"API documentation at http://localhost:{settings.port}/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    seed_database()
