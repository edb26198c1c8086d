"""Routes package - register all blueprints."""

from flask import Flask


def register_blueprints(app: Flask):
    """Register all blueprints with the application."""
    from .contact import contact_bp

    app.register_blueprint(contact_bp, url_prefix=app.config.get('FORMMAIL_URL_PREFIX') or None)
