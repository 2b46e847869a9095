"""Tests for the Redis-backed rate limiter and cache."""

from unittest.mock import MagicMock

import redis

from clinic_api.core.redis_client import CacheManager, RateLimiter


def test_rate_limiter_sets_expiry_on_first_hit():
    mock_redis = MagicMock()
    mock_redis.incr.return_value = 1
    limiter = RateLimiter(mock_redis)

    assert limiter.check_rate_limit("rate:booking:1.2.3.4", limit=5, window=60) is True
    mock_redis.incr.assert_called_once_with("rate:booking:1.2.3.4")
    mock_redis.expire.assert_called_once_with("rate:booking:1.2.3.4", 60)


def test_rate_limiter_blocks_over_limit():
    mock_redis = MagicMock()
    limiter = RateLimiter(mock_redis)

    mock_redis.incr.return_value = 5
    assert limiter.check_rate_limit("key", limit=5) is True
    mock_redis.expire.assert_not_called()

    mock_redis.incr.return_value = 6
    assert limiter.check_rate_limit("key", limit=5) is False


def test_rate_limiter_fails_open():
    mock_redis = MagicMock()
    mock_redis.incr.side_effect = redis.ConnectionError("down")

    assert RateLimiter(mock_redis).check_rate_limit("key", limit=1) is True


def test_cache_manager_get_json():
    """Test CacheManager get_json method."""
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    # Test cache miss
    mock_redis.get.return_value = None
    assert cache_manager.get_json("ticker:active") is None

    # Test cache hit
    mock_redis.get.return_value = '[{"message": "Notice"}]'
    assert cache_manager.get_json("ticker:active") == [{"message": "Notice"}]


def test_cache_manager_set_json_with_ttl():
    mock_redis = MagicMock()
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.set_json("ticker:active", [], ttl=60) is True
    mock_redis.setex.assert_called_once_with("ticker:active", 60, "[]")


def test_cache_manager_fails_soft():
    mock_redis = MagicMock()
    mock_redis.get.side_effect = redis.ConnectionError("down")
    mock_redis.delete.side_effect = redis.ConnectionError("down")
    cache_manager = CacheManager(redis_client=mock_redis)

    assert cache_manager.get_json("ticker:active") is None
    assert cache_manager.delete("ticker:active") is False
