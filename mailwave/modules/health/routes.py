"""
Health Routes
=============

Static liveness payload; never touches the document store.
"""

from flask import jsonify

from . import health_bp


@health_bp.route('/')
@health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    return jsonify({'status': 'OK', 'message': 'Backend is running'}), 200
