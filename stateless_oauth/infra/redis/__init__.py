from stateless_oauth.infra.redis.redis_revocation_store import RedisRevocationStore

__all__ = ["RedisRevocationStore"]
