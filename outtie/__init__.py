from flask import Flask, jsonify
from sqlalchemy import event

from outtie.config import Config
from outtie.errors import register_error_handlers
from outtie.extensions import db, migrate, jwt, mail
from outtie.utils.auth import register_jwt_callbacks
from outtie.utils.validation import IdConverter


def _enable_sqlite_foreign_keys(dbapi_connection, _record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.url_map.strict_slashes = False
    app.url_map.converters["id"] = IdConverter

    # mappers reference each other by name, so every model must be imported
    from outtie.models import user, item, item_photo, saved_item, rental, review, email_token  # noqa: F401

    db.init_app(app)
    with app.app_context():
        if db.engine.dialect.name == "sqlite":
            # cascades rely on ON DELETE CASCADE
            event.listen(db.engine, "connect", _enable_sqlite_foreign_keys)
        if app.config.get("AUTO_CREATE_TABLES"):
            db.create_all()

    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)
    register_jwt_callbacks(jwt)
    register_error_handlers(app)

    from outtie.controllers.auth_controller import auth_bp
    from outtie.controllers.user_controller import user_bp
    from outtie.controllers.item_controller import item_bp
    from outtie.controllers.rental_controller import rental_bp
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(user_bp, url_prefix="/api/users")
    app.register_blueprint(item_bp, url_prefix="/api/items")
    app.register_blueprint(rental_bp, url_prefix="/api/rentals")

    @app.get("/health")
    def health():
        return jsonify({"success": True, "status": "OK", "message": "Outtie API is running"})

    from outtie.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
