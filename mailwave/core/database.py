import logging
import threading
from collections import deque
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import BSONError
from flask import current_app
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import DuplicateKeyError, PyMongoError

from .config import Config
from .errors import ConflictError, StoreError

logger = logging.getLogger(__name__)

# Failures raised while writing a document: driver errors, plus BSON encoding
# errors (oversized documents, unencodable strings such as lone surrogates)
WRITE_ERRORS = (PyMongoError, BSONError, UnicodeEncodeError)

# Entries kept by InMemoryDatabase before the oldest are dropped
MAX_MEMORY_LOGS = 1000


def utcnow():
    """Current UTC time truncated to the millisecond precision BSON stores"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def serialize(document):
    """Convert a stored document into a JSON-ready dict"""
    if document is None:
        return None
    result = {}
    for key, value in document.items():
        if isinstance(value, ObjectId):
            value = str(value)
        elif isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            value = value.isoformat()
        result[key] = value
    return result


class MongoDatabase:
    """
    Document store backed by MongoDB.

    The client is created here and owned by this object; pass an existing
    MongoClient to share one. Driver errors are translated into the
    MailWave error taxonomy so views never see pymongo exceptions.
    """

    def __init__(self, uri=None, db_name=None, selection_timeout_ms=None, client=None):
        self.uri = uri or Config.MONGODB_URI
        if client is None:
            timeout_ms = selection_timeout_ms or Config.MONGODB_SELECTION_TIMEOUT_MS
            client = MongoClient(self.uri, serverSelectionTimeoutMS=timeout_ms, tz_aware=True)
        self._client = client
        if db_name:
            self._db = client[db_name]
        else:
            self._db = client.get_default_database(default='newsletter')
        self._subscribers = self._db[Config.SUBSCRIBERS_COLLECTION]
        self._posts = self._db[Config.POSTS_COLLECTION]
        self._logs = self._db[Config.LOGS_COLLECTION]
        self._indexes_ready = False

    def ping(self):
        """Round-trip to the server; raises StoreError when unreachable"""
        try:
            self._client.admin.command('ping')
        except PyMongoError as e:
            raise StoreError(f"MongoDB is unreachable: {e}") from e

    def ensure_indexes(self):
        """Create the unique email index and the sort indexes (idempotent)"""
        if self._indexes_ready:
            return
        try:
            self._subscribers.create_index([('email', ASCENDING)], unique=True)
            self._subscribers.create_index([('subscribedAt', DESCENDING)])
            self._posts.create_index([('createdAt', DESCENDING)])
        except PyMongoError as e:
            raise StoreError(f"Failed to create indexes: {e}") from e
        self._indexes_ready = True
        logger.info("MongoDB indexes created/verified successfully")

    def add_subscriber(self, email):
        """Insert a subscriber; the unique index rejects duplicates"""
        self.ensure_indexes()
        document = {'email': email, 'subscribedAt': utcnow()}
        try:
            result = self._subscribers.insert_one(document)
        except DuplicateKeyError as e:
            raise ConflictError('Email already subscribed') from e
        except WRITE_ERRORS as e:
            raise StoreError(f"Failed to insert subscriber: {e}") from e
        document['_id'] = result.inserted_id
        return document

    def list_subscribers(self):
        try:
            cursor = self._subscribers.find().sort([('subscribedAt', DESCENDING), ('_id', DESCENDING)])
            return list(cursor)
        except PyMongoError as e:
            raise StoreError(f"Failed to list subscribers: {e}") from e

    def create_post(self, post):
        document = dict(post)
        document['createdAt'] = utcnow()
        try:
            result = self._posts.insert_one(document)
        except WRITE_ERRORS as e:
            raise StoreError(f"Failed to insert post: {e}") from e
        document['_id'] = result.inserted_id
        return document

    def list_posts(self):
        try:
            cursor = self._posts.find().sort([('createdAt', DESCENDING), ('_id', DESCENDING)])
            return list(cursor)
        except PyMongoError as e:
            raise StoreError(f"Failed to list posts: {e}") from e

    def get_post(self, post_id):
        """Return the post with this id, or None"""
        try:
            return self._posts.find_one({'_id': ObjectId(post_id)})
        except PyMongoError as e:
            raise StoreError(f"Failed to fetch post {post_id}: {e}") from e

    def insert_log(self, entry):
        try:
            self._logs.insert_one(dict(entry))
        except WRITE_ERRORS as e:
            raise StoreError(f"Failed to write log entry: {e}") from e

    def close(self):
        self._client.close()
        logger.info("MongoDB connection closed")


class InMemoryDatabase:
    """
    Process-local document store with the same interface as MongoDatabase.

    Used by the test suite and for running without a database server.
    A lock around check-and-insert stands in for the unique email index.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers = []
        self._posts = []
        self.logs = deque(maxlen=MAX_MEMORY_LOGS)
        self._seq = 0

    def ping(self):
        return True

    def ensure_indexes(self):
        pass

    def _next_seq(self):
        self._seq += 1
        return self._seq

    def add_subscriber(self, email):
        with self._lock:
            if any(doc['email'] == email for _, doc in self._subscribers):
                raise ConflictError('Email already subscribed')
            document = {'_id': ObjectId(), 'email': email, 'subscribedAt': utcnow()}
            self._subscribers.append((self._next_seq(), document))
        return dict(document)

    def list_subscribers(self):
        with self._lock:
            rows = sorted(self._subscribers, key=lambda r: (r[1]['subscribedAt'], r[0]), reverse=True)
        return [dict(doc) for _, doc in rows]

    def create_post(self, post):
        document = dict(post)
        document['_id'] = ObjectId()
        document['createdAt'] = utcnow()
        with self._lock:
            self._posts.append((self._next_seq(), document))
        return dict(document)

    def list_posts(self):
        with self._lock:
            rows = sorted(self._posts, key=lambda r: (r[1]['createdAt'], r[0]), reverse=True)
        return [dict(doc) for _, doc in rows]

    def get_post(self, post_id):
        oid = ObjectId(post_id)
        with self._lock:
            for _, doc in self._posts:
                if doc['_id'] == oid:
                    return dict(doc)
        return None

    def insert_log(self, entry):
        with self._lock:
            self.logs.append(dict(entry))

    def close(self):
        pass


def get_store():
    """Return the store injected into the running app"""
    return current_app.extensions['mailwave'].store


def build_database(config=None):
    """Create the store selected by STORE_BACKEND"""
    config = config or {}
    backend = config.get('STORE_BACKEND', Config.STORE_BACKEND)

    if backend == 'memory':
        logger.info("Using in-memory document store")
        return InMemoryDatabase()
    if backend == 'mongo':
        return MongoDatabase(
            uri=config.get('MONGODB_URI', Config.MONGODB_URI),
            db_name=config.get('MONGODB_DB', Config.MONGODB_DB),
            selection_timeout_ms=config.get('MONGODB_SELECTION_TIMEOUT_MS',
                                            Config.MONGODB_SELECTION_TIMEOUT_MS),
        )
    raise ValueError(f"Unknown STORE_BACKEND: {backend!r}")
