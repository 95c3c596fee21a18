import os
import logging

from flask import Flask, jsonify, redirect, render_template, url_for
from flask_cors import CORS
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import PersistenceError
from .models import Base
from .views import bp as catalog_bp

# ---------------------------------------------------------
# Logging
# ---------------------------------------------------------
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app(overrides=None):
    """
    Build the catalog application.

    ``overrides`` is a mapping applied on top of ``Config``; tests use it
    to point the app at a throwaway database.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    # ---------------------------------------------------------
    # DB setup
    # ---------------------------------------------------------
    engine = create_engine(
        app.config["SQLALCHEMY_DATABASE_URI"],
        echo=app.config["SQLALCHEMY_ECHO"],
        future=True,
    )
    app.extensions["catalog_engine"] = engine
    app.extensions["catalog_sessions"] = sessionmaker(
        bind=engine, autoflush=False, autocommit=False
    )

    # Create tables if not present
    Base.metadata.create_all(engine)

    app.register_blueprint(catalog_bp)
    register_routes(app)
    register_error_handlers(app)

    logger.info("Catalog service ready on %s", engine.url.render_as_string(hide_password=True))
    return app


def register_routes(app):
    @app.get("/")
    def index():
        return redirect(url_for("catalog.bookinstance_list"))

    @app.get("/api/health")
    def health_check():
        return jsonify({"status": "ok", "service": "catalog_service"}), 200


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def http_error(err):
        # Routing redirects are HTTPExceptions too; let them through.
        if err.code is None or err.code < 400:
            return err
        if err.code == 404:
            logger.info("Not found: %s", err.description)
        return (
            render_template(
                "error.html",
                title=err.name,
                message=err.description,
                status=err.code,
            ),
            err.code,
        )

    @app.errorhandler(PersistenceError)
    def persistence_error(err):
        logger.exception("Database failure: %s", err)
        return (
            render_template(
                "error.html",
                title="Error",
                message="Something went wrong while talking to the database.",
                status=500,
            ),
            500,
        )


if __name__ == "__main__":
    port = int(os.getenv("PORT", "5000"))
    create_app().run(host="0.0.0.0", port=port, debug=True)
