"""Flask application factory."""

import os
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import config
from .utils.log import configure_logging


def create_app(config_name=None, env_loader=None, service_factory=None, **flask_kwargs):
    """Create and configure the Flask application.

    Args:
        config_name: Key of :data:`formmail.config.config`, defaults to ``FLASK_CONFIG``
        env_loader: Loader for the service settings. When given, the contact
            service is initialized right away instead of on the first request
        service_factory: Builds the contact service from the loaded settings
        flask_kwargs: Passed to :class:`flask.Flask`, e.g. ``static_folder``
    """
    if config_name is None:
        config_name = os.environ.get('FLASK_CONFIG', 'default')

    app = Flask(__name__, **flask_kwargs)
    app.config.from_object(config[config_name])

    configure_logging(app.config['LOG_LEVEL'], app.config['LOG_FORMAT'])

    if app.config.get('BEHIND_PROXY'):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    # Register blueprints
    from .routes import register_blueprints
    register_blueprints(app)

    if env_loader is not None:
        from .services import contact_service
        contact_service.init(env_loader, service_factory)

    return app
