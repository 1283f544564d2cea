"""
Pytest fixtures and configuration for EstateHub tests
"""
import fnmatch
import time

import pytest

from estatehub import redis_cache
from estatehub.app import create_app
from estatehub.db import db


class InMemoryRedis:
    """Redis double covering the commands the cache layer uses, with TTL expiry"""

    def __init__(self):
        self.store = {}
        self.clock = time.monotonic
        self.offset = 0

    def _now(self):
        return self.clock() + self.offset

    def advance(self, seconds):
        """Move the clock forward to expire entries"""
        self.offset += seconds

    def _alive(self, key):
        entry = self.store.get(key)
        if entry is None:
            return False
        value, expires_at = entry
        if expires_at is not None and expires_at <= self._now():
            del self.store[key]
            return False
        return True

    def ping(self):
        return True

    def get(self, key):
        if not self._alive(key):
            return None
        return self.store[key][0]

    def setex(self, key, ttl, value):
        self.store[key] = (value, self._now() + ttl)
        return True

    def ttl(self, key):
        if not self._alive(key):
            return -2
        return int(self.store[key][1] - self._now())

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self._alive(key):
                del self.store[key]
                removed += 1
        return removed

    def scan_iter(self, match=None, count=None):
        for key in list(self.store):
            if self._alive(key) and (match is None or fnmatch.fnmatchcase(key, match)):
                yield key

    def live_keys(self):
        return sorted(k for k in list(self.store) if self._alive(k))


@pytest.fixture
def redis_double():
    return InMemoryRedis()


@pytest.fixture
def app_config(redis_double):
    """App configuration for tests"""
    return {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'REDIS_CLIENT': redis_double,
        'JWT_SECRET': 'test-secret-key',
        'SECRET_KEY': 'test-secret-key',
        'RATELIMIT_ENABLED': False,
        'INVALIDATE_SEARCH_ON_WRITE': False,
    }


@pytest.fixture
def app(app_config):
    # No app context stays pushed: each request must get its own g so the
    # authenticated user is resolved per request.
    _app = create_app(app_config)
    redis_cache.reset_cache_stats()
    yield _app
    with _app.app_context():
        db.session.remove()
        db.drop_all()
    redis_cache.init_cache(client=None)


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, name="Alice", email="alice@example.com", password="secret123"):
    response = client.post('/api/auth/register', json={'name': name, 'email': email, 'password': password})
    assert response.status_code == 201, response.get_json()
    return response.get_json()['data']


@pytest.fixture
def alice(client):
    """Registered user with bearer headers"""
    data = register(client)
    return {'user': data['user'], 'headers': {'Authorization': f"Bearer {data['token']}"}}


@pytest.fixture
def bob(client):
    data = register(client, name="Bob", email="bob@example.com")
    return {'user': data['user'], 'headers': {'Authorization': f"Bearer {data['token']}"}}


@pytest.fixture
def property_payload():
    """Factory for valid property bodies"""
    def _payload(**overrides):
        payload = {
            'title': 'Sunny flat',
            'type': 'Apartment',
            'price': 250000,
            'state': 'Karnataka',
            'city': 'Bangalore',
            'areaSqFt': 1200,
            'bedrooms': 2,
            'bathrooms': 2,
            'amenities': ['pool', 'gym', 'parking'],
            'furnished': 'Semi',
            'availableFrom': '2026-01-15',
            'listedBy': 'Owner',
            'tags': ['family', 'metro'],
            'colorTheme': '#ffcc00',
            'rating': 4.2,
            'isVerified': True,
            'listingType': 'sale',
        }
        payload.update(overrides)
        return payload
    return _payload


@pytest.fixture
def create_property(client, property_payload):
    """Create a property through the API and return its JSON representation"""
    def _create(headers, **overrides):
        response = client.post('/api/properties', json=property_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.get_json()
        return response.get_json()['data']
    return _create
