"""
MailWave - Newsletter & Blog
============================

A small three-tier web application:
- REST API for newsletter subscribers and blog posts, stored in MongoDB
- Single-page client UI that lists posts and submits subscriptions

Usage:
    from mailwave import create_app

    app = create_app()                                  # store from STORE_BACKEND
    app = create_app(store=InMemoryDatabase())          # injected store (tests)

Or wire the extension into an existing Flask app:
    from mailwave import MailWave

    mailwave = MailWave(app, store=my_store)
"""

__version__ = '0.1.0'

import logging

from flask import Flask
from flask_cors import CORS

from .core import Config, build_database, configure_logging

logger = logging.getLogger(__name__)


class MailWave:
    """
    Flask extension that owns the document store and registers the modules.

    The store is created from app.config unless one is injected. Modules can
    be switched off with config={'features': {'frontend': False}}.
    """

    def __init__(self, app=None, store=None, config=None):
        self.store = store
        self._config = config or {}
        self._registered = []

        if app is not None:
            self.init_app(app)

    def _feature_enabled(self, name):
        return self._config.get('features', {}).get(name, True)

    def _blueprints(self):
        from .modules.health import health_bp
        from .modules.subscribers import subscribers_bp
        from .modules.posts import posts_bp
        from .modules.frontend import frontend_bp

        return [
            ('health', health_bp),
            ('subscribers', subscribers_bp),
            ('posts', posts_bp),
            ('frontend', frontend_bp),
        ]

    def init_app(self, app):
        """Attach the store, enable CORS on the API and register blueprints"""
        if self.store is None:
            self.store = build_database(app.config)

        CORS(app, resources={r"/api/*": {"origins": "*"}})

        for name, blueprint in self._blueprints():
            if not self._feature_enabled(name):
                logger.info(f"Module disabled: {name}")
                continue
            app.register_blueprint(blueprint)
            self._registered.append(name)

        app.extensions['mailwave'] = self

    def get_registered_modules(self):
        return list(self._registered)

    def close(self):
        """Release the store connection"""
        if self.store is not None:
            self.store.close()


def create_app(config=None, store=None):
    """
    Application factory.

    Args:
        config (dict): overrides applied on top of Config
        store: document store to use instead of building one from config
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    configure_logging(app.config.get('LOG_LEVEL', 'INFO'))

    MailWave(app, store=store, config={'features': app.config.get('FEATURES', {})})
    return app


__all__ = ['MailWave', 'create_app', '__version__']
