"""
Frontend Routes
===============

Provides:
- GET / -- post list and subscribe form
- POST /subscribe -- submit the form, flash the outcome, redirect home
"""

from datetime import datetime

from flask import current_app, flash, redirect, render_template, request, session, url_for

from . import frontend_bp
from .client import ApiClient


def _get_api_client():
    """Build an API client from the app config"""
    return ApiClient(
        current_app.config['API_URL'],
        timeout=current_app.config.get('API_TIMEOUT', 10)
    )


@frontend_bp.app_template_filter('format_date')
def format_date(value):
    """Render an ISO-8601 timestamp as a short date"""
    if not value:
        return ''
    try:
        return datetime.fromisoformat(value).strftime('%d %b %Y')
    except (TypeError, ValueError):
        return value


@frontend_bp.route('/')
def index():
    """Homepage with the latest posts"""
    posts = _get_api_client().get_posts()
    email = session.pop('subscribe_email', '')
    return render_template('frontend/index.html', posts=posts, email=email)


@frontend_bp.route('/subscribe', methods=['POST'])
def subscribe():
    """Forward the subscribe form to the API"""
    email = request.form.get('email', '')
    success, message = _get_api_client().subscribe(email)
    flash(message, 'success' if success else 'error')
    if not success:
        # Keep what the user typed so they can correct it, out of the URL
        session['subscribe_email'] = email
    return redirect(url_for('frontend.index'))
