from timedshortener.dao.redis.redis_key_schema import RedisKeySchema
from timedshortener.dao.redis.kv_redis_dao import KeyValueRedisDAO


__all__ = [
    'RedisKeySchema',
    'KeyValueRedisDAO',
]
