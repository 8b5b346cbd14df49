from typing import Optional
import redis

from games.challenge import ChallengeResult


class RedisClient:
    def __init__(self, host: str, port: int, client: Optional[redis.Redis] = None):
        self.redis = client or redis.Redis(host=host, port=port, decode_responses=True)
        self.max_history = 30        # Store 30 solves per channel
        self.history_expiry = 7200   # 2 hours expiry

    def _history_key(self, server_id: str, channel_id: str) -> str:
        return f"history:{server_id}:{channel_id}"

    def get_history(self, server_id: str, channel_id: str) -> list[ChallengeResult]:
        """Recent solves for a channel, oldest first"""
        key = self._history_key(server_id, channel_id)
        entries = self.redis.lrange(key, 0, -1)
        return [ChallengeResult.from_json(entry) for entry in entries] if entries else []

    def add_to_history(self, server_id: str, channel_id: str, result: ChallengeResult):
        key = self._history_key(server_id, channel_id)
        self.redis.rpush(key, result.to_json())

        # Keep only the most recent solves
        self.redis.ltrim(key, -self.max_history, -1)
        self.redis.expire(key, self.history_expiry)

    def clear_history(self, server_id: str, channel_id: str):
        self.redis.delete(self._history_key(server_id, channel_id))

    def add_allowed_channel(self, server_id: str, channel_id: str):
        """Add a channel to the list of allowed channels"""
        key = f"allowed_channels:{server_id}"
        self.redis.sadd(key, channel_id)

    def remove_allowed_channel(self, server_id: str, channel_id: str):
        """Remove a channel from the list of allowed channels"""
        key = f"allowed_channels:{server_id}"
        self.redis.srem(key, channel_id)

    def get_allowed_channels(self, server_id: str) -> list[str]:
        """Get all allowed channels for a server"""
        key = f"allowed_channels:{server_id}"
        channels = self.redis.smembers(key)
        return sorted(channels) if channels else []

    def is_channel_allowed(self, server_id: str, channel_id: str) -> bool:
        """Check if a channel is allowed for a server"""
        key = f"allowed_channels:{server_id}"
        return bool(self.redis.sismember(key, channel_id))

    def clear_allowed_channels(self, server_id: str):
        """Clear all allowed channels for a server"""
        self.redis.delete(f"allowed_channels:{server_id}")
