# bookshop/services/token_service.py
import secrets

import redis

from bookshop.domain.errors import InvalidToken
from bookshop.domain.schemas import UserRead
from bookshop.utils.retry import redis_retry
from bookshop.utils.settings import REDIS_URL, TOKEN_TTL_SECONDS
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)


class TokenService:
    """
    -opaque bearer tokens kept in redis
    -token expires on its own through EX, nothing has to clean it up
    """

    def __init__(self, url: str | None = None, ttl: int = TOKEN_TTL_SECONDS):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl

    @staticmethod
    def _key(token: str) -> str:
        return f"token:{token}"

    @redis_retry()
    def generate_token(self, user: UserRead) -> str:
        token = secrets.token_urlsafe(32)
        logger.info(f"Issue token for user {user.id}")
        #SET token:<t> '{"id": 1, ...}' NX EX 900
        stored = self.redis.set(
            name=self._key(token),
            value=user.model_dump_json(),
            nx=True,
            ex=self.ttl,
        )
        if not stored:
            #32 random bytes colliding means something is badly wrong
            raise RuntimeError("token collision")
        return token

    @redis_retry()
    def get_user(self, token: str) -> UserRead:
        if not token:
            raise InvalidToken("missing token")
        raw = self.redis.get(self._key(token))
        if raw is None:
            raise InvalidToken("invalid or expired token")
        return UserRead.model_validate_json(raw)

    @redis_retry()
    def revoke_token(self, token: str) -> bool:
        return bool(self.redis.delete(self._key(token)))
