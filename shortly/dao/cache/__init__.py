from shortly.dao.cache.cache_key_schema import CacheKeySchema
from shortly.dao.cache.mixins import ElastiCacheClientMixin
from shortly.dao.cache.task_cache_dao import TaskCacheDAO
from shortly.dao.cache.constants import CacheTTL

__all__ = [
    'CacheKeySchema',
    'ElastiCacheClientMixin',
    'TaskCacheDAO',
    'CacheTTL',
]
