"""
HTTP client for the MailWave API, used by the frontend blueprint.
"""

import logging

import requests

logger = logging.getLogger(__name__)

SUBSCRIBE_SUCCESS = '✅ Successfully subscribed!'
SUBSCRIBE_FALLBACK = '❌ Subscription failed'


class ApiClient:
    """Thin wrapper around the public API endpoints"""

    def __init__(self, base_url, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        # Plain requests.get/post unless the caller owns a Session
        self.session = session or requests

    def get_posts(self):
        """Fetch all posts, newest first. Returns [] when the API is unavailable."""
        try:
            response = self.session.get(f"{self.base_url}/posts", timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error fetching posts: {e}")
            return []

    def subscribe(self, email):
        """
        Submit a subscription request.

        Returns:
            tuple: (success, message) where message is ready to show the user;
            on failure it is the server's error text when there is one.
        """
        try:
            response = self.session.post(
                f"{self.base_url}/subscribe",
                json={'email': email},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Subscription request failed: {e}")
            return False, SUBSCRIBE_FALLBACK

        if response.ok:
            return True, SUBSCRIBE_SUCCESS

        return False, _error_message(response)


def _error_message(response):
    """Pull the 'error' field out of an API error response"""
    try:
        data = response.json()
    except ValueError:
        return SUBSCRIBE_FALLBACK
    if isinstance(data, dict) and data.get('error'):
        return data['error']
    return SUBSCRIBE_FALLBACK
