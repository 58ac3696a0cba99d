# host, port, db, username (from SSM Parameter Store)
type ElastiCacheParameters = tuple[str, int, int, str | None]

# username, password (from Secrets Manager)
type ElastiCacheUserSecret = tuple[str | None, str | None]
