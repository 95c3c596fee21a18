"""
Pytest configuration and shared fixtures for the catalog service tests.
"""
from datetime import date

import pytest

from catalog_service.app import create_app
from catalog_service.models import Book, BookInstance


@pytest.fixture
def app(tmp_path):
    """A catalog app bound to a throwaway SQLite file."""
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'catalog.db'}",
        }
    )
    yield app
    app.extensions["catalog_engine"].dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    """A session separate from the ones the request handlers use."""
    session = app.extensions["catalog_sessions"]()
    yield session
    session.close()


@pytest.fixture
def books(db_session):
    """Two books; returns their ids in insertion order."""
    rows = [
        Book(title="Clean Code", author="Robert C. Martin", isbn="978-0132350884"),
        Book(title="Effective Java", author="Joshua Bloch", isbn="978-0134685991"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return [b.id for b in rows]


@pytest.fixture
def instance(db_session, books):
    """One loaned copy of the first book; returns its id."""
    copy = BookInstance(
        book_id=books[0],
        imprint="Prentice Hall, 2008",
        status="Loaned",
        due_back=date(2026, 11, 30),
    )
    db_session.add(copy)
    db_session.commit()
    return copy.id
