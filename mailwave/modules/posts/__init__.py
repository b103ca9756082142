"""
Posts Module
============

Blog post API.

Provides:
- Post creation with trimmed title/content/author
- Post listing, newest first
- Single post lookup by store identifier
"""

from flask import Blueprint

posts_bp = Blueprint(
    'posts',
    __name__,
    url_prefix='/api/posts'
)

from . import routes

__all__ = ['posts_bp']
