"""
Subscribers Module
==================

Provides:
- Public API for newsletter subscriptions
- Subscriber listing, most recent first
"""

from flask import Blueprint

subscribers_bp = Blueprint(
    'subscribers',
    __name__,
    url_prefix='/api'
)

from . import routes

__all__ = ['subscribers_bp']
