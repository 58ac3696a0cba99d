# Event codes (logged under `event` and returned as `errorCode`)
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
CONFIG_UNAVAILABLE = 'CONFIG_UNAVAILABLE'
DATA_STORE_UNAVAILABLE = 'DATA_STORE_UNAVAILABLE'
SHORT_URL_RESOLVED = 'SHORT_URL_RESOLVED'
