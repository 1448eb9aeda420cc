"""
Flask application factory.

Creates and configures the Flask app, registers all blueprints.
"""
from flask import Flask


def create_app():
    """Create and configure the Flask application."""
    from creatorlink.config import SECRET_KEY
    from creatorlink.logging_config import configure_logging

    app = Flask(__name__)

    configure_logging(app)

    app.secret_key = SECRET_KEY

    # Register blueprints
    from creatorlink.routes.health import bp as health_bp
    from creatorlink.routes.outreach import bp as outreach_bp
    from creatorlink.routes.matching import bp as matching_bp
    from creatorlink.routes.discovery import bp as discovery_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(outreach_bp)
    app.register_blueprint(matching_bp)
    app.register_blueprint(discovery_bp)

    # Import models so Base.metadata knows about them (required for SQLAlchemy).
    # Schema is managed by Alembic; no init_db() call.
    import importlib
    importlib.import_module('creatorlink.models.creator_profile')
    importlib.import_module('creatorlink.models.brand_profile')
    importlib.import_module('creatorlink.models.campaign')
    importlib.import_module('creatorlink.models.creator_identity')
    importlib.import_module('creatorlink.models.discovered_creator')
    importlib.import_module('creatorlink.models.platform_account')
    importlib.import_module('creatorlink.models.unlock')
    importlib.import_module('creatorlink.models.outreach_event')

    return app
