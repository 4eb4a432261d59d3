"""Password hashing backed by bcrypt."""
import bcrypt
from starlette.concurrency import run_in_threadpool

from market.config import settings


class PasswordHasher:
    """
    One-way hash and verify for user passwords.

    bcrypt is deliberately slow, so request handlers use the ``*_async``
    variants, which run the work in Starlette's threadpool instead of on
    the event loop.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed or non-bcrypt hash.
            return False

    async def hash_async(self, password: str) -> str:
        return await run_in_threadpool(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await run_in_threadpool(self.verify, password, password_hash)


password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
