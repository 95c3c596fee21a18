"""
Repositories over the catalog tables.

Each repository wraps one request-scoped SQLAlchemy session. Reads that
need the referenced Book resolved take ``populate=True``; writes commit
immediately so every save/update/remove is atomic on its own record.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload, load_only

from .errors import PersistenceError
from .models import Book, BookInstance, STATUS_AVAILABLE

logger = logging.getLogger(__name__)


class BaseRepository:
    model = None

    def __init__(self, session):
        self.session = session

    def _options(self, populate):
        return []

    def find_by_id(self, item_id, populate=False):
        try:
            q = select(self.model).where(self.model.id == item_id)
            q = q.options(*self._options(populate))
            return self.session.execute(q).unique().scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

    def find_all(self, projection=None, populate=False):
        """
        Return every record. ``projection`` names the columns to load
        (the id is always loaded).
        """
        try:
            q = select(self.model)
            if projection:
                q = q.options(load_only(*[getattr(self.model, c) for c in projection]))
            q = q.options(*self._options(populate))
            return self.session.execute(q).unique().scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e

    def save(self, entity):
        try:
            self.session.add(entity)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(str(e)) from e
        return entity

    def find_by_id_and_update(self, item_id, fields):
        """
        Apply ``fields`` to the record with ``item_id`` and commit.
        Returns the updated record, or None when it does not exist.
        """
        try:
            entity = self.session.get(self.model, item_id)
            if entity is None:
                return None
            for key, value in fields.items():
                setattr(entity, key, value)
            self._normalize(entity)
            self.session.commit()
        except (ValueError, SQLAlchemyError) as e:
            self.session.rollback()
            raise PersistenceError(str(e)) from e
        return entity

    def find_by_id_and_remove(self, item_id):
        """Delete the record and return it, or None when it was not there."""
        try:
            entity = self.session.get(self.model, item_id)
            if entity is None:
                return None
            self.session.delete(entity)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(str(e)) from e
        return entity

    def _normalize(self, entity):
        pass


class BookRepository(BaseRepository):
    model = Book


class BookInstanceRepository(BaseRepository):
    model = BookInstance

    def _options(self, populate):
        if populate:
            return [joinedload(BookInstance.book)]
        return []

    def save(self, entity):
        self._normalize(entity)
        return super().save(entity)

    def _normalize(self, entity):
        # A copy on the shelf has no due date.
        if entity.status == STATUS_AVAILABLE:
            entity.due_back = None
