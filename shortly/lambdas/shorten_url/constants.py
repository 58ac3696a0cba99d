# Event codes (logged under `event` and returned as `errorCode`)
INVALID_JSON_BODY = 'INVALID_JSON_BODY'
MISSING_LONG_URL = 'MISSING_LONG_URL'
CONFIG_UNAVAILABLE = 'CONFIG_UNAVAILABLE'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
SHORTCODE_COLLISION = 'SHORTCODE_COLLISION'
SHORT_URL_REUSED = 'SHORT_URL_REUSED'
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
