from shortly.dao.redis.redis_key_schema import RedisKeySchema
from shortly.dao.redis.mixins import RedisClientMixin
from shortly.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from shortly.dao.redis.task_redis_dao import TaskRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortURLRedisDAO',
    'TaskRedisDAO',
]
