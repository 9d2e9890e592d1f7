import json
import logging
import zlib
from typing import Optional, Any
import redis

logger = logging.getLogger(__name__)


class CacheService:
    """Simple Redis cache (JSON or text payloads, optional zlib).

    Every operation degrades to a miss when Redis is unreachable; the cache
    never takes a page down with it.
    """

    def __init__(self, client: Optional["redis.Redis"] = None, compress: bool = True):
        self.redis = client
        self.compress = compress

    @classmethod
    def from_url(cls, url: Optional[str], compress: bool = True) -> "CacheService":
        if not url:
            logger.info("REDIS_URL not set, caching disabled")
            return cls(None, compress=compress)
        return cls(redis.Redis.from_url(url, decode_responses=False), compress=compress)

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    def _get_raw(self, key: str) -> Optional[str]:
        if self.redis is None:
            return None
        try:
            data = self.redis.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed for {key}: {str(e)}")
            return None
        if data is None:
            return None
        if self.compress:
            try:
                data = zlib.decompress(data)
            except zlib.error:
                pass
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError:
                return None
        return data

    def _set_raw(self, key: str, value: str, ttl_seconds: int) -> bool:
        if self.redis is None:
            return False
        raw = value.encode("utf-8")
        payload = zlib.compress(raw) if self.compress else raw
        try:
            self.redis.setex(key, ttl_seconds, payload)
        except Exception as e:
            logger.warning(f"Cache write failed for {key}: {str(e)}")
            return False
        return True

    def get_text(self, key: str) -> Optional[str]:
        return self._get_raw(key)

    def set_text(self, key: str, value: str, ttl_seconds: int) -> bool:
        return self._set_raw(key, value, ttl_seconds)

    def get_json(self, key: str) -> Optional[Any]:
        data = self._get_raw(key)
        if data is None:
            return None
        try:
            return json.loads(data)
        except ValueError:
            return None

    def set_json(self, key: str, value: Any, ttl_seconds: int) -> bool:
        try:
            raw = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError):
            return False
        return self._set_raw(key, raw, ttl_seconds)

    def delete(self, key: str) -> int:
        if self.redis is None:
            return 0
        try:
            return int(self.redis.delete(key))
        except Exception as e:
            logger.warning(f"Cache delete failed for {key}: {str(e)}")
            return 0

    def close(self) -> None:
        if self.redis is not None:
            self.redis.close()
