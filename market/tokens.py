"""
Signed, time-bounded session tokens.

Two kinds of token are issued for every login: a short-lived *access* token
presented on each authenticated request and a long-lived *refresh* token
presented only to mint a new pair.  The kinds are signed with different
secrets, so a token of one kind never verifies as the other.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable

import jwt

from market.config import settings


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenInvalid(TokenError):
    """Bad signature, wrong kind, or malformed token."""


class TokenExpired(TokenError):
    """The token's lifetime has elapsed."""


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Issues and verifies access/refresh JWTs.

    *clock* returns the current aware datetime; it is used both to stamp
    ``iat``/``exp`` and to judge expiry, so a fixed clock makes issuance and
    verification fully deterministic.
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(hours=1),
        refresh_ttl: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not access_secret or not refresh_secret:
            raise ValueError("Token secrets cannot be empty")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets")
        self._secrets = {TokenKind.ACCESS: access_secret, TokenKind.REFRESH: refresh_secret}
        self._ttls = {TokenKind.ACCESS: access_ttl, TokenKind.REFRESH: refresh_ttl}
        self._algorithm = algorithm
        self._clock = clock

    def issue(self, subject_id: int, kind: TokenKind) -> str:
        now = self._clock()
        payload = {
            "sub": str(subject_id),
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttls[kind]).timestamp()),
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self._algorithm)

    def issue_pair(self, subject_id: int) -> TokenPair:
        return TokenPair(
            access_token=self.issue(subject_id, TokenKind.ACCESS),
            refresh_token=self.issue(subject_id, TokenKind.REFRESH),
        )

    def verify(self, token: str, kind: TokenKind) -> int:
        """
        Return the subject id carried by *token*.

        Raises ``TokenInvalid`` when the signature does not verify under the
        secret for *kind* or the payload is malformed, and ``TokenExpired``
        when ``exp`` is not after the service clock.
        """
        try:
            # Time claims are judged below against the injected clock only.
            payload = jwt.decode(
                token,
                self._secrets[kind],
                algorithms=[self._algorithm],
                options={
                    "require": ["sub", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            raise TokenInvalid(str(exc)) from exc

        try:
            expires_at = int(payload["exp"])
            subject_id = int(payload["sub"])
        except (TypeError, ValueError) as exc:
            raise TokenInvalid(f"Malformed token payload: {exc}") from exc

        if expires_at <= int(self._clock().timestamp()):
            raise TokenExpired("Token has expired")
        return subject_id


token_service = TokenService(
    access_secret=settings.JWT_ACCESS_SECRET,
    refresh_secret=settings.JWT_REFRESH_SECRET,
    access_ttl=timedelta(seconds=settings.ACCESS_TOKEN_TTL_SECONDS),
    refresh_ttl=timedelta(seconds=settings.REFRESH_TOKEN_TTL_SECONDS),
    algorithm=settings.JWT_ALGORITHM,
)
