"""Verification of session tokens issued by the site's sign-in provider.

The sign-in provider issues an HS256 JWT carrying the user's email and an
``isAdmin`` flag. This service never issues sessions for real users; it only
verifies the signature and expiry and reads the flag.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

logger = logging.getLogger(__name__)

SESSION_ALGORITHM = "HS256"


@dataclass(frozen=True)
class AdminSession:
    """Identity read from a verified session token."""

    email: str | None
    is_admin: bool


class SessionValidator:
    """Decodes and validates session JWTs."""

    def __init__(self, secret: str, algorithm: str = SESSION_ALGORITHM) -> None:
        """Initialize validator.

        Args:
            secret: Shared signing secret
            algorithm: JWT signing algorithm
        """
        self.secret = secret
        self.algorithm = algorithm

    def decode(self, token: str) -> AdminSession | None:
        """Decode a session token.

        Args:
            token: Encoded JWT

        Returns:
            AdminSession if the token is authentic and unexpired, None otherwise
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as e:
            logger.debug(f"Session token rejected: {e!s}")
            return None

        return AdminSession(email=payload.get("email"), is_admin=payload.get("isAdmin") is True)

    def issue(self, email: str, is_admin: bool, ttl: timedelta = timedelta(hours=8)) -> str:
        """Issue a session token, for local development and tests.

        Args:
            email: Account email
            is_admin: Admin flag
            ttl: Token lifetime

        Returns:
            str: Encoded JWT
        """
        claims = {"email": email, "isAdmin": is_admin, "exp": datetime.now(UTC) + ttl}
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)
