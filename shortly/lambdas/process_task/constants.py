# Event codes (logged under `event`)
MISSING_TASK_ID = 'MISSING_TASK_ID'
CONFIG_UNAVAILABLE = 'CONFIG_UNAVAILABLE'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
TASK_PROCESSED = 'TASK_PROCESSED'
