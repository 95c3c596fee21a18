import logging

from flask import abort, redirect, render_template, url_for

from .forms import (
    BookInstanceCreateForm,
    BookInstanceUpdateForm,
    FieldError,
    parse_form,
)
from .models import BOOK_INSTANCE_STATUSES, BookInstance

logger = logging.getLogger(__name__)


class BookInstanceHandlers:
    """
    List / detail / create / update / delete for book copies.

    The repositories are passed in by the caller; nothing here opens or
    closes a database session.
    """

    def __init__(self, books, instances):
        self.books = books
        self.instances = instances

    # ----------------- list & detail -----------------

    def list(self):
        instances = self.instances.find_all(populate=True)
        return render_template(
            "bookinstance_list.html",
            title="Book Instance List",
            bookinstance_list=instances,
        )

    def detail(self, instance_id):
        instance = self.instances.find_by_id(instance_id, populate=True)
        if instance is None:
            abort(404, description="Book copy not found")
        return render_template(
            "bookinstance_detail.html",
            title="Book:",
            bookinstance=instance,
        )

    # ----------------- create -----------------

    def create_form(self):
        return self.render_form("Create BookInstance")

    def create_submit(self, data):
        result = parse_form(BookInstanceCreateForm, data)
        errors = list(result.errors)
        if result.is_valid:
            errors.extend(self._check_book(result.form.book))

        if errors:
            return self.render_form(
                "Create BookInstance",
                values=result.values,
                errors=errors,
            )

        form = result.form
        instance = BookInstance(
            book_id=form.book,
            imprint=form.imprint,
            status=form.status,
            due_back=form.due_back,
        )
        self.instances.save(instance)
        logger.info("Created book instance %s for book %s", instance.id, form.book)
        return redirect(url_for("catalog.bookinstance_detail", id=instance.id))

    # ----------------- update -----------------

    def update_form(self, instance_id):
        # Sequential on one session (sessions are not thread-safe); either
        # lookup failing still fails the whole request.
        instance = self.instances.find_by_id(instance_id)
        books = self.books.find_all(projection=("title",))
        if instance is None:
            abort(404, description="Bookinstance not found")
        return self.render_form(
            "Update BookInstance",
            values=_values_from(instance),
            instance_id=instance_id,
            books=books,
        )

    def update_submit(self, instance_id, data):
        result = parse_form(BookInstanceUpdateForm, data)
        errors = list(result.errors)
        if result.is_valid:
            errors.extend(self._check_book(result.form.book))

        if errors:
            return self.render_form(
                "Update BookInstance",
                values=result.values,
                errors=errors,
                instance_id=instance_id,
            )

        form = result.form
        updated = self.instances.find_by_id_and_update(
            instance_id,
            {
                "book_id": form.book,
                "imprint": form.imprint,
                "status": form.status,
                "due_back": form.due_back,
            },
        )
        if updated is None:
            logger.warning("Update of missing book instance %s", instance_id)
            abort(404, description="Bookinstance not found")
        logger.info("Updated book instance %s", instance_id)
        return redirect(url_for("catalog.bookinstance_detail", id=updated.id))

    # ----------------- delete -----------------

    def delete_form(self, instance_id):
        instance = self.instances.find_by_id(instance_id, populate=True)
        if instance is None:
            return redirect(url_for("catalog.bookinstance_list"))
        return render_template(
            "bookinstance_delete.html",
            title="Delete Book Instance",
            bookinstance=instance,
        )

    def delete_submit(self, instance_id):
        # Nothing references a book copy, so there is no dependency check.
        removed = self.instances.find_by_id_and_remove(instance_id)
        if removed is None:
            logger.warning("Delete of missing book instance %s", instance_id)
        else:
            logger.info("Deleted book instance %s", instance_id)
        return redirect(url_for("catalog.bookinstance_list"))

    # ----------------- helpers -----------------

    def render_form(self, title, values=None, errors=None, instance_id=None, books=None):
        """
        Load the Book choices and render the BookInstance form. Used for the
        empty create form, the update form and every re-render after a
        failed submit.
        """
        values = values or {}
        if books is None:
            books = self.books.find_all(projection=("title",))
        return render_template(
            "bookinstance_form.html",
            title=title,
            book_list=books,
            statuses=BOOK_INSTANCE_STATUSES,
            values=values,
            selected_book=values.get("book"),
            errors=errors or [],
            instance_id=instance_id,
        )

    def _check_book(self, book_id):
        if self.books.find_by_id(book_id) is None:
            return [FieldError("book", "Book not found", book_id)]
        return []


def _values_from(instance):
    return {
        "book": instance.book_id,
        "imprint": instance.imprint,
        "status": instance.status,
        "due_back": instance.due_back_iso,
    }
