"""
Tests for the Redis-backed solve history and channel settings.
"""

from unittest.mock import MagicMock

import pytest

from db.redis_client import RedisClient
from games.challenge import ChallengeResult


@pytest.fixture
def fake_redis():
    return MagicMock()


@pytest.fixture
def client(fake_redis):
    return RedisClient('localhost', 6379, client=fake_redis)


def make_result(target=24):
    return ChallengeResult(numbers=[1, 3, 1, 5], target=target,
                           expression="( ( 1 + 3 ) * ( 1 + 5 ) )",
                           value=24, elapsed_us=10, solved_at=1.0)


class TestHistory:

    def test_add_trims_and_expires(self, client, fake_redis):
        result = make_result()
        client.add_to_history('s1', 'c1', result)
        fake_redis.rpush.assert_called_once_with('history:s1:c1', result.to_json())
        fake_redis.ltrim.assert_called_once_with('history:s1:c1', -30, -1)
        fake_redis.expire.assert_called_once_with('history:s1:c1', 7200)

    def test_get_history(self, client, fake_redis):
        fake_redis.lrange.return_value = [make_result(24).to_json(), make_result(10).to_json()]
        history = client.get_history('s1', 'c1')
        fake_redis.lrange.assert_called_once_with('history:s1:c1', 0, -1)
        assert [r.target for r in history] == [24, 10]
        assert history[0].solved

    def test_get_empty_history(self, client, fake_redis):
        fake_redis.lrange.return_value = []
        assert client.get_history('s1', 'c1') == []

    def test_clear_history(self, client, fake_redis):
        client.clear_history('s1', 'c1')
        fake_redis.delete.assert_called_once_with('history:s1:c1')


class TestAllowedChannels:

    def test_add_and_remove(self, client, fake_redis):
        client.add_allowed_channel('s1', 'c1')
        fake_redis.sadd.assert_called_once_with('allowed_channels:s1', 'c1')
        client.remove_allowed_channel('s1', 'c1')
        fake_redis.srem.assert_called_once_with('allowed_channels:s1', 'c1')

    def test_list(self, client, fake_redis):
        fake_redis.smembers.return_value = {'c2', 'c1'}
        assert client.get_allowed_channels('s1') == ['c1', 'c2']

    def test_is_allowed(self, client, fake_redis):
        fake_redis.sismember.return_value = 1
        assert client.is_channel_allowed('s1', 'c1') is True
        fake_redis.sismember.return_value = 0
        assert client.is_channel_allowed('s1', 'c1') is False
