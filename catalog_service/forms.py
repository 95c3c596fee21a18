"""
Form DTOs for BookInstance submissions.

Raw request bodies are sanitized first (trimmed, markup escaped) and then
validated by a pydantic model. The sanitized values are kept either way so
a rejected form can be re-rendered with what the user typed.
"""
from datetime import date, datetime
from typing import Any, Dict, List, NamedTuple, Optional

from markupsafe import escape
from pydantic import BaseModel, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from .models import BOOK_INSTANCE_STATUSES, STATUS_MAINTENANCE

FORM_FIELDS = ("book", "imprint", "status", "due_back")


class FieldError(NamedTuple):
    field: str
    message: str
    value: Any = None


def sanitize(value: Optional[str]) -> str:
    """Trim surrounding whitespace and neutralize HTML markup."""
    if value is None:
        return ""
    return str(escape(str(value).strip()))


def sanitize_form(data) -> Dict[str, str]:
    return {name: sanitize(data.get(name)) for name in FORM_FIELDS}


def parse_iso_date(value: str) -> date:
    """Accept a calendar date or a full ISO 8601 timestamp."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise PydanticCustomError("invalid_date", "Invalid date")


def _require(value: str, error_type: str, message: str) -> str:
    if not value:
        raise PydanticCustomError(error_type, message)
    return value


class BookInstanceCreateForm(BaseModel):
    book: str
    imprint: str
    status: str = STATUS_MAINTENANCE
    due_back: Optional[date] = None

    @field_validator("book")
    @classmethod
    def book_specified(cls, v: str) -> str:
        return _require(v, "book_required", "Book must be specified")

    @field_validator("imprint")
    @classmethod
    def imprint_specified(cls, v: str) -> str:
        return _require(v, "imprint_required", "Imprint must be specified")

    @field_validator("status")
    @classmethod
    def known_status(cls, v: str) -> str:
        if not v:
            return STATUS_MAINTENANCE
        if v not in BOOK_INSTANCE_STATUSES:
            raise PydanticCustomError("invalid_status", "Invalid status")
        return v

    @field_validator("due_back", mode="before")
    @classmethod
    def iso_due_back(cls, v: Any) -> Optional[date]:
        if v is None or v == "":
            return None
        if isinstance(v, date):
            return v
        return parse_iso_date(str(v))


class BookInstanceUpdateForm(BaseModel):
    book: str
    imprint: str
    status: str
    # Not parsed here; the store casts it when the record is written.
    due_back: str

    @field_validator("book")
    @classmethod
    def book_not_empty(cls, v: str) -> str:
        return _require(v, "book_required", "Book must not be empty.")

    @field_validator("imprint")
    @classmethod
    def imprint_not_empty(cls, v: str) -> str:
        return _require(v, "imprint_required", "Imprint must not be empty.")

    @field_validator("status")
    @classmethod
    def status_not_empty(cls, v: str) -> str:
        _require(v, "status_required", "Status must not be empty.")
        if v not in BOOK_INSTANCE_STATUSES:
            raise PydanticCustomError("invalid_status", "Invalid status")
        return v

    @field_validator("due_back")
    @classmethod
    def due_back_not_empty(cls, v: str) -> str:
        return _require(v, "due_back_required", "due_back must not be empty")


class FormResult(NamedTuple):
    values: Dict[str, str]
    form: Optional[BaseModel]
    errors: List[FieldError]

    @property
    def is_valid(self) -> bool:
        return not self.errors


def field_errors(exc: ValidationError, values: Dict[str, str]) -> List[FieldError]:
    errors = []
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else ""
        errors.append(FieldError(field, err["msg"], values.get(field)))
    return errors


def parse_form(form_cls, data) -> FormResult:
    """Sanitize ``data`` and validate it against ``form_cls``."""
    values = sanitize_form(data)
    try:
        form = form_cls.model_validate(values)
    except ValidationError as exc:
        return FormResult(values, None, field_errors(exc, values))
    return FormResult(values, form, [])
