from shortly.dao.base.short_url_base_dao import ShortURLBaseDAO
from shortly.dao.base.task_base_dao import TaskBaseDAO
from shortly.dao.base.task_cache_base_dao import TaskCacheBaseDAO


__all__ = [
    'ShortURLBaseDAO',
    'TaskBaseDAO',
    'TaskCacheBaseDAO',
]
