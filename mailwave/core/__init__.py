"""
MailWave Core
=============

Configuration, document store, validation and logging shared by the modules.
"""

from .config import Config
from .database import InMemoryDatabase, MongoDatabase, build_database, get_store, serialize
from .errors import ConflictError, MailWaveError, NotFoundError, StoreError, ValidationError
from .logging_service import LoggingService, configure_logging, db_logger

__all__ = [
    'Config', 'InMemoryDatabase', 'MongoDatabase', 'build_database', 'get_store', 'serialize',
    'ConflictError', 'MailWaveError', 'NotFoundError', 'StoreError', 'ValidationError',
    'LoggingService', 'configure_logging', 'db_logger',
]
