from typing import Optional
import uuid

from src.config import settings
from src.config.database import get_redis_client


class SessionRepository:
    """
    Sesiones de login en Redis.
    Clave: session:{token} -> userId, con TTL.
    """

    @staticmethod
    def _key(token: str) -> str:
        return f"session:{token}"

    def create(self, user_id: str, ttl_seconds: Optional[int] = None) -> str:
        token = uuid.uuid4().hex
        ttl = ttl_seconds or settings.SESSION_TTL_SECONDS
        get_redis_client().set(self._key(token), user_id, ex=ttl)
        return token

    def resolve(self, token: str) -> Optional[str]:
        user_id = get_redis_client().get(self._key(token))
        if isinstance(user_id, bytes):
            user_id = user_id.decode("utf-8")
        return user_id

    def delete(self, token: str) -> None:
        get_redis_client().delete(self._key(token))
