import os

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from codetasks.errors import TaskError


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object("codetasks.config.Config")
    if isinstance(config_object, dict):
        app.config.update(config_object)
    elif config_object is not None:
        app.config.from_object(config_object)

    # Core extensions
    CORS(app, resources={r"/api/*": {"origins": "*"}}, supports_credentials=True)
    JWTManager(app)

    # Initialize DB client and teardown hooks
    from codetasks.utils.db import init_app as init_db, get_db

    init_db(app)

    # Attachment store, shared across requests
    from codetasks.services.file_store import create_file_store

    app.extensions["file_store"] = create_file_store(app.config)

    # Register blueprints
    from codetasks.routes.task_routes import tasks_bp

    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    if not app.config.get("AWS_S3_BUCKET"):
        app.logger.warning("AWS_S3_BUCKET is not set; task attachments will not be deleted from storage.")

    @app.cli.command("init-db")
    def init_db_command():
        """Create the unique title index on the tasks collection."""
        from codetasks.stores.task_store import TaskStore

        TaskStore(get_db().tasks).ensure_indexes()
        app.logger.info("Task indexes ensured on %s", app.config["MONGO_DB_NAME"])

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", service="Code Tasks API"), 200

    @app.errorhandler(TaskError)
    def task_error(exc):
        if exc.status_code >= 500:
            app.logger.error("Request failed: %s", exc.code)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(error="Not Found"), 404

    @app.errorhandler(500)
    def server_error(_):
        return jsonify(error="Internal Server Error"), 500

    return app


if __name__ == "__main__":
    # Direct run support: python -m codetasks.app
    create_app().run(
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "1") == "1",
    )
