# catalog_service/models.py
import uuid
from datetime import date, datetime

from sqlalchemy.orm import declarative_base, relationship, validates
from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    String,
    Text,
)

Base = declarative_base()

STATUS_AVAILABLE = "Available"
STATUS_MAINTENANCE = "Maintenance"
STATUS_LOANED = "Loaned"
STATUS_RESERVED = "Reserved"

BOOK_INSTANCE_STATUSES = (
    STATUS_AVAILABLE,
    STATUS_MAINTENANCE,
    STATUS_LOANED,
    STATUS_RESERVED,
)


def new_id():
    return uuid.uuid4().hex


class Book(Base):
    __tablename__ = "book"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    author = Column(String(255))
    summary = Column(Text)
    isbn = Column(String(20))
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    instances = relationship("BookInstance", back_populates="book")


class BookInstance(Base):
    """
    A physical copy of a Book. `due_back` only carries a value while the
    copy is out of the library (any status other than Available).
    """
    __tablename__ = "book_instance"

    id = Column(String(32), primary_key=True, default=new_id)
    book_id = Column(String(32), ForeignKey("book.id"), nullable=False)
    # Escaped markup can make the stored text longer than what was typed.
    imprint = Column(Text, nullable=False)
    status = Column(
        Enum(*BOOK_INSTANCE_STATUSES, name="book_instance_status"),
        nullable=False,
        default=STATUS_MAINTENANCE,
    )
    due_back = Column(Date)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    book = relationship("Book", back_populates="instances")

    @validates("due_back")
    def _cast_due_back(self, key, value):
        # Form values arrive as strings; the column only holds dates.
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value))
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(str(value)).date()
        except ValueError:
            raise ValueError(f"Cast to date failed for value {value!r} at path {key!r}")

    @property
    def url(self):
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self):
        if not self.due_back:
            return ""
        return self.due_back.strftime("%b %d, %Y")

    @property
    def due_back_iso(self):
        if not self.due_back:
            return ""
        return self.due_back.isoformat()
