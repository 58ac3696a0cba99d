from enum import IntEnum

from shortly.constants import TTL


class CacheTTL(IntEnum):
    """TTL caching tiers in seconds. PERMANENT entries never expire."""

    PERMANENT = 0
    HOT = TTL.ONE_HOUR
    WARM = TTL.ONE_DAY
    COOL = TTL.ONE_WEEK
