"""
Tests for the Redis cache layer
"""
import json
from typing import Any, Dict, Optional, get_type_hints
from unittest.mock import MagicMock

import pytest
import redis

from estatehub import redis_cache


@pytest.fixture
def cache(redis_double):
    """Cache wired to the in-memory double, disabled again afterwards"""
    redis_cache.init_cache(client=redis_double)
    redis_cache.reset_cache_stats()
    yield redis_double
    redis_cache.init_cache(client=None)


@pytest.fixture
def broken_cache():
    """Cache whose every command raises a connection error"""
    client = MagicMock()
    error = redis.exceptions.ConnectionError("Connection refused")
    client.get.side_effect = error
    client.setex.side_effect = error
    client.delete.side_effect = error
    client.scan_iter.side_effect = error
    redis_cache.init_cache(client=client)
    redis_cache.reset_cache_stats()
    yield client
    redis_cache.init_cache(client=None)


class TestCacheOperations:
    """Basic get/set/delete behaviour"""

    def test_set_then_get_returns_json(self, cache):
        assert redis_cache.cache_set('property:list', [{'id': 'P1'}], 300)
        assert redis_cache.cache_get_json('property:list') == [{'id': 'P1'}]
        assert 299 <= cache.ttl('property:list') <= 300

    def test_absent_key_is_a_miss(self, cache):
        assert redis_cache.cache_get_json('property:detail:nope') is None
        stats = redis_cache.get_cache_stats()
        assert stats['misses'] == 1
        assert stats['hits'] == 0

    def test_set_overwrites(self, cache):
        redis_cache.cache_set('property:detail:P1', {'price': 1}, 600)
        redis_cache.cache_set('property:detail:P1', {'price': 2}, 600)
        assert redis_cache.cache_get_json('property:detail:P1') == {'price': 2}

    def test_expired_entry_is_a_miss(self, cache):
        redis_cache.cache_set('property:list', [], 300)
        cache.advance(301)
        assert redis_cache.cache_get_json('property:list') is None

    def test_undecodable_entry_is_dropped(self, cache):
        cache.setex('property:list', 300, '{not json')
        assert redis_cache.cache_get_json('property:list') is None
        assert cache.get('property:list') is None

    def test_delete_prefix_only_touches_prefix(self, cache):
        redis_cache.cache_set('property:search:{"city":"Pune"}', [], 300)
        redis_cache.cache_set('property:search:{}', [], 300)
        redis_cache.cache_set('property:list', [], 300)
        cache.setex('other:key', 300, 'x')

        assert redis_cache.cache_delete_prefix('property:search:') == 2
        assert cache.live_keys() == ['other:key', 'property:list']


class TestInvalidation:
    """Scope of the write-path invalidation helpers"""

    @pytest.fixture
    def populated(self, cache):
        redis_cache.cache_set('property:list', [], 300)
        redis_cache.cache_set('property:detail:P1', {}, 600)
        redis_cache.cache_set('property:detail:P2', {}, 600)
        redis_cache.cache_set('property:search:{}', [], 300)
        return cache

    def test_update_scope_leaves_search_and_other_details(self, populated):
        redis_cache.invalidate_property_cache('P1')
        assert populated.live_keys() == ['property:detail:P2', 'property:search:{}']

    def test_update_scope_with_search(self, populated):
        redis_cache.invalidate_property_cache('P1', include_search=True)
        assert populated.live_keys() == ['property:detail:P2']

    def test_create_scope_drops_whole_namespace(self, populated):
        populated.setex('session:abc', 300, 'x')
        assert redis_cache.invalidate_all_property_caches() == 4
        assert populated.live_keys() == ['session:abc']


class TestGracefulDegradation:
    """Redis failures behave as misses and never raise"""

    def test_get_error_is_a_miss(self, broken_cache):
        assert redis_cache.cache_get_json('property:list') is None
        assert redis_cache.get_cache_stats()['errors'] == 1

    def test_set_error_returns_false(self, broken_cache):
        assert redis_cache.cache_set('property:list', [], 300) is False

    def test_delete_errors_return_nothing_removed(self, broken_cache):
        assert redis_cache.cache_delete('property:list') is False
        assert redis_cache.cache_delete_prefix('property:') == 0
        assert redis_cache.invalidate_property_cache('P1', include_search=True) == 0
        assert redis_cache.get_cache_stats()['errors'] == 3

    def test_cache_info_reports_error(self, broken_cache):
        info = redis_cache.get_cache_info()
        assert info['status'] == 'error'

    def test_disabled_cache_is_a_noop(self):
        redis_cache.init_cache(client=None)
        assert not redis_cache.is_cache_enabled()
        assert redis_cache.cache_get_json('property:list') is None
        assert redis_cache.cache_set('property:list', [], 300) is False
        assert redis_cache.invalidate_all_property_caches() == 0
        assert redis_cache.get_cache_stats() == {'status': 'disabled'}

    def test_unreachable_url_keeps_client_and_misses(self):
        redis_cache.init_cache(url='redis://127.0.0.1:1/0')
        redis_cache.reset_cache_stats()
        try:
            assert redis_cache.is_cache_enabled()
            assert redis_cache.cache_get_json('property:list') is None
            assert redis_cache.cache_set('property:list', [], 300) is False
            assert redis_cache.get_cache_stats()['errors'] == 2
        finally:
            redis_cache.init_cache(client=None)

    def test_unparseable_url_disables_cache(self):
        redis_cache.init_cache(url='not-a-redis-url')
        assert not redis_cache.is_cache_enabled()

    def test_reads_fall_back_to_database_when_redis_is_down(self, app, client, alice, create_property):
        create_property(alice['headers'], id='P-DOWN')
        failing = MagicMock()
        failing.get.side_effect = redis.exceptions.TimeoutError("timed out")
        failing.setex.side_effect = redis.exceptions.TimeoutError("timed out")
        redis_cache.init_cache(client=failing)

        response = client.get('/api/properties/P-DOWN')
        data = response.get_json()
        assert response.status_code == 200
        assert data['data']['id'] == 'P-DOWN'
        assert data['fromCache'] is False

        listing = client.get('/api/properties').get_json()
        assert listing['count'] == 1
        assert listing['fromCache'] is False

    def test_stored_value_is_plain_json(self, cache):
        redis_cache.cache_set('property:detail:P1', {'id': 'P1', 'price': 10}, 600)
        assert json.loads(cache.get('property:detail:P1')) == {'id': 'P1', 'price': 10}


@pytest.mark.parametrize('func, expected', [
    (redis_cache.cache_get, Optional[str]),
    (redis_cache.cache_get_json, Any),
    (redis_cache.cache_set, bool),
    (redis_cache.cache_delete, bool),
    (redis_cache.cache_delete_prefix, int),
    (redis_cache.get_cache_info, Dict),
])
def test_public_cache_functions_are_annotated(func, expected):
    assert get_type_hints(func)['return'] == expected
