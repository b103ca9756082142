"""
Centralized logging service for MailWave.
Provides structured logging with document-store persistence and easy integration.
"""

import logging

from flask import current_app, has_app_context, has_request_context, request

from .database import utcnow
from .errors import StoreError

logger = logging.getLogger('mailwave')

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def configure_logging(level='INFO'):
    """Configure the root logger once for the whole process"""
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


class LoggingService:
    """Application event log: stdout via logging, plus the app_logs collection"""

    @staticmethod
    def _get_store():
        """Return the store attached to the current app, if any"""
        if not has_app_context():
            return None
        extension = current_app.extensions.get('mailwave')
        return getattr(extension, 'store', None)

    @staticmethod
    def _get_request_context():
        """Extract request context information"""
        if not has_request_context():
            return None, None, None

        ip_address = request.headers.get('X-Forwarded-For', request.remote_addr)
        if ip_address and ',' in ip_address:
            ip_address = ip_address.split(',')[0].strip()

        user_agent = request.headers.get('User-Agent', '')[:500]
        return ip_address, user_agent, request.path

    @staticmethod
    def log(level, source, message, details=None, persist=True):
        """
        Log a message to stdout and persist it to the document store

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (subscribers, posts, server, etc.)
            message (str): Main log message
            details (dict): Additional structured details
            persist (bool): False skips the app_logs write, e.g. when the
                store has just failed and another round trip would only wait
                out the same timeout
        """
        level = level.upper()
        line = f"[{source}] {message}"
        if details:
            line = f"{line} {details}"
        logger.log(getattr(logging, level, logging.INFO), line)

        if not persist:
            return

        store = LoggingService._get_store()
        if store is None:
            return

        ip_address, user_agent, request_path = LoggingService._get_request_context()
        entry = {
            'timestamp': utcnow(),
            'level': level,
            'source': source,
            'message': message,
            'details': details,
            'ip_address': ip_address,
            'user_agent': user_agent,
            'request_path': request_path,
        }
        try:
            store.insert_log(entry)
        except StoreError as e:
            # Persistent sink is best effort; stdout already has the entry
            logger.warning(f"Logging service error: {e.message}")

    @staticmethod
    def info(source, message, details=None, persist=True):
        LoggingService.log('INFO', source, message, details, persist)

    @staticmethod
    def warning(source, message, details=None, persist=True):
        LoggingService.log('WARNING', source, message, details, persist)

    @staticmethod
    def error(source, message, details=None, persist=True):
        LoggingService.log('ERROR', source, message, details, persist)


# Convenience instance for easy importing
db_logger = LoggingService()
