from flask import Flask, jsonify
from book_network.config import Config
from book_network.extensions import db, migrate, jwt
from book_network.errors import register_error_handlers


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # models must be imported before migrate / create_all see the metadata
    from book_network import models  # noqa: F401

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    register_error_handlers(app)

    from book_network.controllers.auth_controller import auth_bp
    from book_network.controllers.book_controller import book_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(book_bp, url_prefix="/books")

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    return app
