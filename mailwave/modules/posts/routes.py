"""
Posts Routes
============

Provides:
- POST /api/posts -- create a post
- GET /api/posts -- all posts, newest first
- GET /api/posts/<post_id> -- single post
"""

import logging

from flask import jsonify, request

from mailwave.core import (
    NotFoundError, StoreError, ValidationError, db_logger, get_store, serialize,
)
from mailwave.core.validation import validate_post, validate_post_id
from . import posts_bp

logger = logging.getLogger(__name__)


@posts_bp.route('', methods=['POST'])
def create_post():
    """Create a blog post from {title, content, author?}"""
    try:
        post = validate_post(request.get_json(silent=True))
        record = get_store().create_post(post)

        db_logger.info('posts', f"Post created: {record['title']}", {'id': str(record['_id'])})
        return jsonify(serialize(record)), 201

    except ValidationError as e:
        return jsonify({'error': e.message}), e.status_code
    except StoreError as e:
        db_logger.error('posts', 'Create post error', {'error': e.message}, persist=False)
        return jsonify({'error': 'Failed to create post'}), 500
    except Exception as e:
        logger.exception("Unexpected error in create_post")
        db_logger.error('posts', 'Create post error', {'error': str(e)})
        return jsonify({'error': 'Failed to create post'}), 500


@posts_bp.route('', methods=['GET'])
def list_posts():
    """Get all posts, newest first"""
    try:
        posts = get_store().list_posts()
        return jsonify([serialize(p) for p in posts]), 200

    except StoreError as e:
        db_logger.error('posts', 'Fetch posts error', {'error': e.message}, persist=False)
        return jsonify({'error': 'Failed to fetch posts'}), 500
    except Exception as e:
        logger.exception("Unexpected error in list_posts")
        db_logger.error('posts', 'Fetch posts error', {'error': str(e)})
        return jsonify({'error': 'Failed to fetch posts'}), 500


@posts_bp.route('/<post_id>', methods=['GET'])
def get_post(post_id):
    """Get single post by store identifier"""
    try:
        validate_post_id(post_id)

        post = get_store().get_post(post_id)
        if post is None:
            raise NotFoundError('Post not found')

        return jsonify(serialize(post)), 200

    except (ValidationError, NotFoundError) as e:
        return jsonify({'error': e.message}), e.status_code
    except StoreError as e:
        db_logger.error('posts', 'Fetch post error', {'error': e.message, 'id': post_id}, persist=False)
        return jsonify({'error': 'Failed to fetch post'}), 500
    except Exception as e:
        logger.exception("Unexpected error in get_post")
        db_logger.error('posts', 'Fetch post error', {'error': str(e), 'id': post_id})
        return jsonify({'error': 'Failed to fetch post'}), 500
