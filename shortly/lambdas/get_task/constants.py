# Event codes (logged under `event` and returned as `errorCode`)
MISSING_TASK_ID = 'MISSING_TASK_ID'
TASK_NOT_FOUND = 'TASK_NOT_FOUND'
CONFIG_UNAVAILABLE = 'CONFIG_UNAVAILABLE'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
CACHE_UNAVAILABLE = 'CACHE_UNAVAILABLE'
TASK_STATUS_SERVED = 'TASK_STATUS_SERVED'
