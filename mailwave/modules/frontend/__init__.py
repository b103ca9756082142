"""
Frontend Module
===============

Single-page client UI: lists the latest posts and submits newsletter
subscriptions. All data goes through the public API at API_URL, so the UI can
be served from a different host than the backend.

Usage:
    from mailwave.modules.frontend import frontend_bp

    app.register_blueprint(frontend_bp)  # Registers at /
"""

from flask import Blueprint

frontend_bp = Blueprint(
    'frontend',
    __name__,
    template_folder='templates',
    static_folder='static',
    static_url_path='/frontend/static'
)

from . import routes

__all__ = ['frontend_bp']
