"""
Subscribers Routes
==================

Provides:
- POST /api/subscribe -- subscribe an email address
- GET /api/subscribers -- all subscribers, most recent first
"""

import logging

from flask import jsonify, request

from mailwave.core import (
    ConflictError, StoreError, ValidationError, db_logger, get_store, serialize,
)
from mailwave.core.validation import validate_subscriber
from . import subscribers_bp

logger = logging.getLogger(__name__)


@subscribers_bp.route('/subscribe', methods=['POST'])
def subscribe():
    """Handle new subscription requests"""
    try:
        subscriber = validate_subscriber(request.get_json(silent=True))
        record = get_store().add_subscriber(subscriber['email'])

        db_logger.info('subscribers', f"New subscriber: {record['email']}")
        return jsonify({
            'message': 'Subscribed successfully',
            'email': record['email']
        }), 201

    except ValidationError as e:
        return jsonify({'error': e.message}), e.status_code
    except ConflictError as e:
        logger.info(f"Duplicate subscription attempt: {subscriber['email']}")
        return jsonify({'error': e.message}), e.status_code
    except StoreError as e:
        db_logger.error('subscribers', 'Subscription error', {'error': e.message}, persist=False)
        return jsonify({'error': 'Subscription failed'}), 500
    except Exception as e:
        logger.exception("Unexpected error in subscribe")
        db_logger.error('subscribers', 'Subscription error', {'error': str(e)})
        return jsonify({'error': 'Subscription failed'}), 500


@subscribers_bp.route('/subscribers', methods=['GET'])
def list_subscribers():
    """Get all subscribers, most recent first"""
    try:
        subscribers = get_store().list_subscribers()
        return jsonify([serialize(s) for s in subscribers]), 200

    except StoreError as e:
        db_logger.error('subscribers', 'Fetch subscribers error', {'error': e.message}, persist=False)
        return jsonify({'error': 'Failed to fetch subscribers'}), 500
    except Exception as e:
        logger.exception("Unexpected error in list_subscribers")
        db_logger.error('subscribers', 'Fetch subscribers error', {'error': str(e)})
        return jsonify({'error': 'Failed to fetch subscribers'}), 500
