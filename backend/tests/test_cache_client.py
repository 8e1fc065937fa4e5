"""
Tests for the Redis-backed cache client against a mocked redis.Redis.
"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from shared.infrastructure.cache import RedisCache


@pytest.fixture
def fake_redis():
    return MagicMock(spec=redis.Redis)


class TestRedisCacheGet:

    def test_decodes_json(self, fake_redis):
        fake_redis.get.return_value = b'{"slug": "salsa-basics"}'
        assert RedisCache(fake_redis).get("course:id:1") == {"slug": "salsa-basics"}
        fake_redis.get.assert_called_once_with("course:id:1")

    def test_missing_key(self, fake_redis):
        fake_redis.get.return_value = None
        assert RedisCache(fake_redis).get("course:id:1") is None

    def test_redis_error_is_a_miss(self, fake_redis):
        fake_redis.get.side_effect = redis.ConnectionError("down")
        assert RedisCache(fake_redis).get("course:id:1") is None

    def test_undecodable_entry_is_a_miss(self, fake_redis):
        fake_redis.get.return_value = b"{not json"
        assert RedisCache(fake_redis).get("course:id:1") is None


class TestRedisCacheSet:

    def test_ttl_uses_setex(self, fake_redis):
        RedisCache(fake_redis).set("course:id:1", {"id": 1}, ttl=300)
        fake_redis.setex.assert_called_once_with("course:id:1", 300, json.dumps({"id": 1}))
        fake_redis.set.assert_not_called()

    def test_without_ttl_uses_set(self, fake_redis):
        RedisCache(fake_redis).set("course:id:1", [1, 2])
        fake_redis.set.assert_called_once_with("course:id:1", json.dumps([1, 2]))
        fake_redis.setex.assert_not_called()

    def test_unserializable_value_is_skipped(self, fake_redis):
        RedisCache(fake_redis).set("course:id:1", object(), ttl=60)
        fake_redis.setex.assert_not_called()

    def test_redis_error_swallowed(self, fake_redis):
        fake_redis.setex.side_effect = redis.TimeoutError("slow")
        RedisCache(fake_redis).set("course:id:1", {"id": 1}, ttl=60)


class TestRedisCacheDelete:

    def test_delete_redis_error_swallowed(self, fake_redis):
        fake_redis.delete.side_effect = redis.ConnectionError("down")
        RedisCache(fake_redis).delete("course:id:1")
        fake_redis.delete.assert_called_once_with("course:id:1")

    def test_pattern_deletes_in_batches(self, fake_redis, monkeypatch):
        monkeypatch.setattr("shared.infrastructure.cache.client.SCAN_BATCH_SIZE", 2)
        keys = [f"course:paginated:{i}" for i in range(5)]
        fake_redis.scan_iter.return_value = iter(keys)
        fake_redis.delete.side_effect = lambda *batch: len(batch)

        deleted = RedisCache(fake_redis).delete_by_pattern("course:paginated:*")

        assert deleted == 5
        fake_redis.scan_iter.assert_called_once_with(match="course:paginated:*", count=2)
        assert [call.args for call in fake_redis.delete.call_args_list] == [
            tuple(keys[0:2]),
            tuple(keys[2:4]),
            tuple(keys[4:5]),
        ]

    def test_pattern_without_matches(self, fake_redis):
        fake_redis.scan_iter.return_value = iter([])
        assert RedisCache(fake_redis).delete_by_pattern("venue:*") == 0
        fake_redis.delete.assert_not_called()

    def test_pattern_redis_error_returns_partial_count(self, fake_redis, monkeypatch):
        monkeypatch.setattr("shared.infrastructure.cache.client.SCAN_BATCH_SIZE", 2)

        def scan(match, count):
            yield "song:id:1"
            yield "song:id:2"
            raise redis.ConnectionError("lost")

        fake_redis.scan_iter.side_effect = scan
        fake_redis.delete.side_effect = lambda *batch: len(batch)

        assert RedisCache(fake_redis).delete_by_pattern("song:*") == 2
