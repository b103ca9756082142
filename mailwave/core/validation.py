"""
Payload validation for subscribers and posts.

These functions never touch the store: each takes the decoded JSON body,
raises ValidationError with a client-facing message, or returns the
normalised fields ready to be persisted.
"""

import re

from bson import ObjectId

from .errors import ValidationError

# local@domain.tld, no whitespace and a single '@'
EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def normalize_email(email):
    """Lower-case and trim an email address"""
    return email.strip().lower()


def is_valid_email(email):
    """Check the basic local@domain.tld shape"""
    return isinstance(email, str) and EMAIL_REGEX.match(email) is not None


def _required_text(payload, field, message):
    value = payload.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def validate_subscriber(payload):
    """
    Validate a subscribe request body.

    Returns:
        dict: {'email': <normalised email>}
    """
    if not isinstance(payload, dict):
        raise ValidationError('Email is required')

    email = payload.get('email')
    if not email or not isinstance(email, str):
        raise ValidationError('Email is required')

    email = normalize_email(email)
    if not is_valid_email(email):
        raise ValidationError('Invalid email format')

    return {'email': email}


def validate_post(payload):
    """
    Validate a create-post request body.

    Title is checked before content. An author that is missing, null or
    blank is dropped; any other non-string author is rejected.

    Returns:
        dict: trimmed 'title', 'content' and, when given, 'author'
    """
    if not isinstance(payload, dict):
        raise ValidationError('Title is required')

    post = {
        'title': _required_text(payload, 'title', 'Title is required'),
        'content': _required_text(payload, 'content', 'Content is required'),
    }

    author = payload.get('author')
    if author is not None:
        if not isinstance(author, str):
            raise ValidationError('Author must be a string')
        if author.strip():
            post['author'] = author.strip()

    return post


def validate_post_id(post_id):
    """Ensure post_id is a well-formed store identifier (24 hex characters)"""
    if not isinstance(post_id, str) or not ObjectId.is_valid(post_id):
        raise ValidationError('Invalid post ID format')
    return post_id
