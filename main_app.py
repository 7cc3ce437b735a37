# main_app.py
import click
from flask import Flask, current_app, g, jsonify, request
from flask_cors import CORS
from sqlalchemy import inspect
from werkzeug.exceptions import HTTPException

from masterxp import db, init_app as backend_init_app
from masterxp.config import Config, default_database_url, normalize_database_url
from masterxp.errors import MasterXPError


def _account_payload(account):
    from masterxp import leveling

    data = account.to_dict()
    data["xp_into_level"] = leveling.xp_into_level(account.xp)
    data["xp_to_next_level"] = leveling.xp_to_next_level(account.xp)
    return data


def _register_error_handlers(app):
    @app.errorhandler(MasterXPError)
    def handle_app_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"ok": False, "error": e.name.lower().replace(" ", "_")}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        current_app.logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"ok": False, "error": "server_error"}), 500


def _register_cli(app):
    @app.cli.command("init-db")
    def init_db_command():
        """Create any missing tables."""
        db.create_all()
        click.echo(f"Database ready: {db.engine.url}")

    @app.cli.command("show-db")
    def show_db_command():
        """Print the database URL and its tables."""
        click.echo(f"SQLALCHEMY_DATABASE_URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
        insp = inspect(db.engine)
        for table in insp.get_table_names():
            cols = [c["name"] for c in insp.get_columns(table)]
            click.echo(f"{table}: {', '.join(cols)}")


def create_app(overrides=None):
    app = Flask(__name__, instance_relative_config=False)

    app.config.update(Config().as_dict())
    if overrides:
        app.config.update(overrides)
    app.config["SQLALCHEMY_DATABASE_URI"] = (
        normalize_database_url(app.config.get("SQLALCHEMY_DATABASE_URI")) or default_database_url()
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    CORS(app, resources={r"/api/*": {"origins": app.config["FRONTEND_ORIGIN"]}})

    db.init_app(app)
    backend_init_app(app)

    _register_error_handlers(app)
    _register_cli(app)

    # imported here so the modules bind to the initialised db
    from masterxp import leveling, schemas, store, task_tracker
    from masterxp.auth import requires_auth

    # ---------------- Routes ----------------

    @app.route("/health")
    def health():
        return jsonify({"ok": True})

    @app.route("/api/me")
    @requires_auth
    def api_me():
        account = store.get_or_create_account(g.subject_id)
        return jsonify({"ok": True, **_account_payload(account)})

    @app.route("/api/xp/add", methods=["POST"])
    @requires_auth
    def api_add_xp():
        amount = schemas.parse_xp_grant(request.get_json(silent=True))
        account = leveling.add_xp(g.subject_id, amount)
        return jsonify({"ok": True, **_account_payload(account)})

    # ------------ API: todos ------------
    @app.route("/api/todos", methods=["GET", "POST"])
    @requires_auth
    def api_todos():
        if request.method == "GET":
            day = schemas.parse_date(request.args.get("date"))
            todos = task_tracker.get_tasks(g.subject_id, day)
            return jsonify({"ok": True, "todos": [t.to_dict() for t in todos]})

        data = schemas.parse_new_task(request.get_json(silent=True))
        todo = task_tracker.add_task(g.subject_id, data["text"], data["date"])
        return jsonify({"ok": True, "todo": todo.to_dict()}), 201

    @app.route("/api/todos/<task_id>", methods=["PATCH", "DELETE"])
    @requires_auth
    def api_todo(task_id):
        if request.method == "DELETE":
            task_tracker.delete_task(g.subject_id, task_id)
            return jsonify({"ok": True})

        patch = schemas.parse_task_patch(request.get_json(silent=True))
        todo, account, awarded = task_tracker.update_task(g.subject_id, task_id, patch)
        return jsonify({
            "ok": True,
            "todo": todo.to_dict(),
            "account": _account_payload(account),
            "awarded_xp": awarded,
        })

    @app.route("/api/todos/clear-completed", methods=["POST"])
    @requires_auth
    def api_clear_completed():
        day = schemas.parse_date(request.args.get("date"))
        deleted = task_tracker.clear_completed(g.subject_id, day)
        return jsonify({"ok": True, "deleted": deleted})

    # ------------ API: state ------------
    @app.route("/api/state")
    @requires_auth
    def api_state():
        """Single snapshot the UI renders from: account, the day's todos and progress."""
        day = schemas.parse_date(request.args.get("date"))
        account = store.get_or_create_account(g.subject_id)
        todos = task_tracker.get_tasks(g.subject_id, day)
        return jsonify({
            "ok": True,
            "user": {"subject_id": account.subject_id},
            "stats": _account_payload(account),
            "date": day.isoformat(),
            "todos": [t.to_dict() for t in todos],
            "progress": task_tracker.daily_progress(todos),
        })

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, host="127.0.0.1", port=3000)
