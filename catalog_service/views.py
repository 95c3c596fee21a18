from functools import wraps

from flask import Blueprint, current_app, request

from .handlers import BookInstanceHandlers
from .repositories import BookInstanceRepository, BookRepository

bp = Blueprint("catalog", __name__, url_prefix="/catalog")


def with_handlers(func):
    """
    Open a session for the request, build the repositories on it and pass
    a BookInstanceHandlers to the view. The session is closed once the
    response has been produced.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        session = current_app.extensions["catalog_sessions"]()
        try:
            handlers = BookInstanceHandlers(
                BookRepository(session),
                BookInstanceRepository(session),
            )
            return func(handlers, *args, **kwargs)
        finally:
            session.close()

    return wrapper


# ----------------- list & detail -----------------

@bp.get("/bookinstances")
@with_handlers
def bookinstance_list(handlers):
    return handlers.list()


@bp.get("/bookinstance/<id>")
@with_handlers
def bookinstance_detail(handlers, id):
    return handlers.detail(id)


# ----------------- create -----------------

@bp.get("/bookinstance/create")
@with_handlers
def bookinstance_create_get(handlers):
    return handlers.create_form()


@bp.post("/bookinstance/create")
@with_handlers
def bookinstance_create_post(handlers):
    return handlers.create_submit(request.form)


# ----------------- update -----------------

@bp.get("/bookinstance/<id>/update")
@with_handlers
def bookinstance_update_get(handlers, id):
    return handlers.update_form(id)


@bp.post("/bookinstance/<id>/update")
@with_handlers
def bookinstance_update_post(handlers, id):
    return handlers.update_submit(id, request.form)


# ----------------- delete -----------------

@bp.get("/bookinstance/<id>/delete")
@with_handlers
def bookinstance_delete_get(handlers, id):
    return handlers.delete_form(id)


@bp.post("/bookinstance/<id>/delete")
@with_handlers
def bookinstance_delete_post(handlers, id):
    instance_id = request.form.get("bookinstanceid", "").strip() or id
    return handlers.delete_submit(instance_id)
