# Event codes (logged under `event` and returned as `errorCode`)
CONFIG_UNAVAILABLE = 'CONFIG_UNAVAILABLE'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
TASK_CREATION_FAILED = 'TASK_CREATION_FAILED'
TASK_CREATED = 'TASK_CREATED'
