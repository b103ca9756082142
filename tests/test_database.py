"""
Document store backends.

MongoDatabase is exercised against a mocked pymongo client; InMemoryDatabase
runs for real.
"""

import threading
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from bson import ObjectId
from bson.errors import InvalidDocument
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError, ServerSelectionTimeoutError

from mailwave.core import (
    ConflictError, InMemoryDatabase, MongoDatabase, StoreError, build_database, serialize,
)
from mailwave.core.database import MAX_MEMORY_LOGS


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def collections():
    return {'subscribers': MagicMock(), 'posts': MagicMock(), 'app_logs': MagicMock()}


@pytest.fixture
def mongo_client(collections):
    client = MagicMock()
    db = MagicMock()
    db.__getitem__.side_effect = collections.__getitem__
    client.__getitem__.return_value = db
    client.get_default_database.return_value = db
    return client


@pytest.fixture
def mongo(mongo_client):
    return MongoDatabase(client=mongo_client, db_name='newsletter')


# ---------------------------------------------------------------------------
# serialize
# ---------------------------------------------------------------------------

def test_serialize_converts_bson_types():
    oid = ObjectId()
    stamp = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    data = serialize({'_id': oid, 'email': 'a@b.co', 'subscribedAt': stamp})

    assert data == {'_id': str(oid), 'email': 'a@b.co', 'subscribedAt': '2026-01-02T03:04:05+00:00'}


def test_serialize_treats_naive_datetimes_as_utc():
    data = serialize({'createdAt': datetime(2026, 1, 2, 3, 4, 5)})
    assert data['createdAt'] == '2026-01-02T03:04:05+00:00'


def test_serialize_none():
    assert serialize(None) is None


# ---------------------------------------------------------------------------
# MongoDatabase
# ---------------------------------------------------------------------------

def test_mongo_uses_default_database_from_uri(mongo_client):
    MongoDatabase(client=mongo_client)
    mongo_client.get_default_database.assert_called_once_with(default='newsletter')


def test_mongo_add_subscriber(mongo, collections):
    oid = ObjectId()
    collections['subscribers'].insert_one.return_value.inserted_id = oid

    record = mongo.add_subscriber('a@b.co')

    assert record['_id'] == oid
    assert record['email'] == 'a@b.co'
    assert record['subscribedAt'].tzinfo is not None
    collections['subscribers'].create_index.assert_any_call([('email', 1)], unique=True)


def test_mongo_indexes_created_once(mongo, collections):
    mongo.add_subscriber('a@b.co')
    mongo.add_subscriber('b@b.co')
    unique_calls = [c for c in collections['subscribers'].create_index.call_args_list
                    if c.kwargs.get('unique')]
    assert len(unique_calls) == 1


def test_mongo_duplicate_email_raises_conflict(mongo, collections):
    collections['subscribers'].insert_one.side_effect = DuplicateKeyError('E11000 duplicate key error')

    with pytest.raises(ConflictError) as exc:
        mongo.add_subscriber('a@b.co')
    assert exc.value.message == 'Email already subscribed'


def test_mongo_insert_failure_raises_store_error(mongo, collections):
    collections['subscribers'].insert_one.side_effect = PyMongoError('socket closed')

    with pytest.raises(StoreError):
        mongo.add_subscriber('a@b.co')


@pytest.mark.parametrize("error", [
    UnicodeEncodeError('utf-8', '\ud800', 0, 1, 'surrogates not allowed'),
    InvalidDocument('BSON document too large'),
])
def test_mongo_create_post_encoding_failure_raises_store_error(mongo, collections, error):
    collections['posts'].insert_one.side_effect = error

    with pytest.raises(StoreError) as exc:
        mongo.create_post({'title': '\ud800', 'content': 'x'})
    assert exc.value.status_code == 500


def test_mongo_add_subscriber_bson_failure_raises_store_error(mongo, collections):
    collections['subscribers'].insert_one.side_effect = InvalidDocument('cannot encode object')

    with pytest.raises(StoreError):
        mongo.add_subscriber('a@b.co')


def test_mongo_insert_log_encoding_failure_raises_store_error(mongo, collections):
    collections['app_logs'].insert_one.side_effect = UnicodeEncodeError(
        'utf-8', '\udcff', 0, 1, 'surrogates not allowed'
    )

    with pytest.raises(StoreError):
        mongo.insert_log({'level': 'INFO', 'message': '\udcff'})


def test_mongo_index_failure_raises_store_error(mongo, collections):
    collections['subscribers'].create_index.side_effect = PyMongoError('not primary')

    with pytest.raises(StoreError):
        mongo.ensure_indexes()


def test_mongo_list_posts_sorted_newest_first(mongo, collections):
    docs = [{'_id': ObjectId(), 'title': 'b'}, {'_id': ObjectId(), 'title': 'a'}]
    collections['posts'].find.return_value.sort.return_value = iter(docs)

    assert mongo.list_posts() == docs
    collections['posts'].find.return_value.sort.assert_called_once_with(
        [('createdAt', DESCENDING), ('_id', DESCENDING)]
    )


def test_mongo_list_subscribers_failure(mongo, collections):
    collections['subscribers'].find.side_effect = PyMongoError('boom')

    with pytest.raises(StoreError):
        mongo.list_subscribers()


def test_mongo_create_post(mongo, collections):
    oid = ObjectId()
    collections['posts'].insert_one.return_value.inserted_id = oid

    record = mongo.create_post({'title': 'T', 'content': 'C'})

    assert record['_id'] == oid
    assert 'createdAt' in record
    inserted = collections['posts'].insert_one.call_args[0][0]
    assert inserted['title'] == 'T'


def test_mongo_get_post_queries_by_object_id(mongo, collections):
    oid = ObjectId()
    collections['posts'].find_one.return_value = None

    assert mongo.get_post(str(oid)) is None
    collections['posts'].find_one.assert_called_once_with({'_id': oid})


def test_mongo_ping_failure(mongo, mongo_client):
    mongo_client.admin.command.side_effect = ServerSelectionTimeoutError('no servers')

    with pytest.raises(StoreError):
        mongo.ping()


def test_mongo_close(mongo, mongo_client):
    mongo.close()
    mongo_client.close.assert_called_once()


# ---------------------------------------------------------------------------
# InMemoryDatabase
# ---------------------------------------------------------------------------

def test_memory_duplicate_email():
    store = InMemoryDatabase()
    store.add_subscriber('a@b.co')

    with pytest.raises(ConflictError):
        store.add_subscriber('a@b.co')
    assert len(store.list_subscribers()) == 1


def test_memory_concurrent_subscribe_single_winner():
    store = InMemoryDatabase()
    results = []
    barrier = threading.Barrier(10)

    def worker():
        barrier.wait()
        try:
            store.add_subscriber('race@example.com')
            results.append('ok')
        except ConflictError:
            results.append('conflict')

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count('ok') == 1
    assert results.count('conflict') == 9
    assert len(store.list_subscribers()) == 1


def test_memory_returns_copies():
    store = InMemoryDatabase()
    post = store.create_post({'title': 'T', 'content': 'C'})
    post['title'] = 'changed'

    assert store.get_post(str(post['_id']))['title'] == 'T'


def test_memory_get_post_unknown():
    assert InMemoryDatabase().get_post(str(ObjectId())) is None


def test_memory_logs_are_capped():
    store = InMemoryDatabase()

    for i in range(MAX_MEMORY_LOGS + 5):
        store.insert_log({'message': f"entry {i}"})

    assert len(store.logs) == MAX_MEMORY_LOGS
    assert store.logs[0]['message'] == 'entry 5'
    assert store.logs[-1]['message'] == f"entry {MAX_MEMORY_LOGS + 4}"


# ---------------------------------------------------------------------------
# build_database
# ---------------------------------------------------------------------------

def test_build_memory_database():
    assert isinstance(build_database({'STORE_BACKEND': 'memory'}), InMemoryDatabase)


def test_build_mongo_database():
    with patch('mailwave.core.database.MongoClient') as client_cls:
        store = build_database({
            'STORE_BACKEND': 'mongo',
            'MONGODB_URI': 'mongodb://db:27017/newsletter',
            'MONGODB_DB': 'mailwave',
            'MONGODB_SELECTION_TIMEOUT_MS': 1000,
        })

    assert isinstance(store, MongoDatabase)
    client_cls.assert_called_once_with('mongodb://db:27017/newsletter',
                                       serverSelectionTimeoutMS=1000, tz_aware=True)
    client_cls.return_value.__getitem__.assert_called_with('mailwave')


def test_build_unknown_backend():
    with pytest.raises(ValueError):
        build_database({'STORE_BACKEND': 'redis'})
