"""Application factory for the TechFest event portal."""

from __future__ import annotations

import os

from flask import Flask, jsonify

from techfest.blueprints import (
    admin_bp,
    announcements_bp,
    auth_bp,
    coordinator_bp,
    dashboard_bp,
    event_head_bp,
    participant_bp,
    public_bp,
    uploads_bp,
)
from techfest.config import Config
from techfest.errors import register_error_handlers
from techfest.extensions import (
    db,
    migrate,
    login_manager,
    csrf,
    limiter,
)
from techfest.logging_config import configure_logging
from techfest.models import User
from techfest.security import configure_security_headers
from techfest.services.db import close_db, ensure_core_tables


def create_app(config_class=Config):
    """Create Flask application."""
    app = Flask(__name__, static_folder="static")
    app.config.from_object(config_class)
    configure_logging(app)

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    # Safety net for development environments without migrations
    if os.getenv('TECHFEST_SKIP_BOOTSTRAP', '0') != '1':
        with app.app_context():
            ensure_core_tables()

    configure_security_headers(app)
    register_error_handlers(app)

    @login_manager.user_loader
    def load_user(user_id: str):
        # A deleted profile simply leaves the session anonymous
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def handle_unauthorized():
        return jsonify({'error': 'Authentication required'}), 401

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(coordinator_bp, url_prefix='/coordinator')
    app.register_blueprint(event_head_bp, url_prefix='/event-head')
    app.register_blueprint(participant_bp, url_prefix='/me')
    app.register_blueprint(announcements_bp, url_prefix='/announcements')
    app.register_blueprint(uploads_bp, url_prefix='/uploads')
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(public_bp)

    @app.teardown_appcontext
    def teardown_db(exception):
        close_db(exception)

    # Register CLI commands
    from techfest.commands import register_commands
    register_commands(app)

    return app


__all__ = ['create_app']
