# seed_demo.py
import os

import requests
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from catalog_service.config import Config
from catalog_service.models import Base, Book

CATALOG_BASE_URL = os.getenv("CATALOG_BASE_URL", "http://localhost:5000")

BOOKS = [
    {
        "isbn": "978-0132350884",
        "title": "Clean Code",
        "author": "Robert C. Martin",
    },
    {
        "isbn": "978-0201616224",
        "title": "The Pragmatic Programmer",
        "author": "Andrew Hunt, David Thomas",
    },
    {
        "isbn": "978-0131103627",
        "title": "The C Programming Language",
        "author": "Brian W. Kernighan, Dennis M. Ritchie",
    },
    {
        "isbn": "978-1491950357",
        "title": "Designing Data-Intensive Applications",
        "author": "Martin Kleppmann",
    },
]

# (imprint, status, due_back) per copy; every book gets each of these
COPIES = [
    ("First edition, 2008", "Available", ""),
    ("Reprint, 2015", "Loaned", "2026-11-30"),
    ("Paperback, 2019", "Maintenance", ""),
]


def check_service(url):
    """Hit /api/health and return True/False."""
    health_url = f"{url.rstrip('/')}/api/health"
    try:
        r = requests.get(health_url, timeout=3)
        print(f"[CHECK] catalog -> {health_url} -> {r.status_code}")
        return r.ok
    except Exception as e:
        print(f"[ERROR] catalog not reachable at {health_url}: {e}")
        return False


def seed_books():
    """Insert the demo books straight into the catalog database."""
    print("\n== Seeding books ==")
    engine = create_engine(Config.SQLALCHEMY_DATABASE_URI, future=True)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    session = SessionLocal()
    try:
        ids = []
        for data in BOOKS:
            q = select(Book).where(Book.isbn == data["isbn"])
            book = session.execute(q).scalar_one_or_none()
            if not book:
                book = Book(**data)
                session.add(book)
                session.commit()
                print(f"  {data['title']}: created")
            else:
                print(f"  {data['title']}: already present")
            ids.append((book.id, book.title))
        return ids
    finally:
        session.close()


def seed_copies(books):
    """Create copies through the public create form."""
    print("\n== Creating book copies ==")
    url = f"{CATALOG_BASE_URL.rstrip('/')}/catalog/bookinstance/create"
    for book_id, title in books:
        for imprint, status, due_back in COPIES:
            try:
                resp = requests.post(
                    url,
                    data={
                        "book": book_id,
                        "imprint": imprint,
                        "status": status,
                        "due_back": due_back,
                    },
                    allow_redirects=False,
                    timeout=5,
                )
                where = resp.headers.get("Location", "")
                print(f"  {title} / {imprint} -> {resp.status_code} {where}")
            except Exception as e:
                print(f"  {title} / {imprint} -> FAILED: {e}")


def main():
    print("Checking catalog service...")
    if not check_service(CATALOG_BASE_URL):
        print("\nCatalog service is not reachable. Start it with: python -m catalog_service.app")
        return

    books = seed_books()
    seed_copies(books)

    print("\nDone.")
    print("Try hitting:")
    print(f"  {CATALOG_BASE_URL}/catalog/bookinstances")


if __name__ == "__main__":
    main()
