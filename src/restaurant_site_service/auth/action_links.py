"""Signed approve/reject links embedded in reservation notification emails.

A link carries a JWT binding one reservation id to one action. Tokens are
audience-scoped so a link token can never pass as a session token.
"""

import logging
from datetime import UTC, datetime, timedelta
from urllib.parse import urlencode

import jwt

from restaurant_site_service.models.booking_models import ReservationStatus

logger = logging.getLogger(__name__)

ACTION_LINK_AUDIENCE = "reservation-action"
ACTION_LINK_TTL = timedelta(days=7)
ACTION_LINK_ALGORITHM = "HS256"


class ActionLinkSigner:
    """Signs and verifies reservation action links."""

    def __init__(self, secret: str, public_base_url: str, ttl: timedelta = ACTION_LINK_TTL) -> None:
        """Initialize signer.

        Args:
            secret: Signing secret
            public_base_url: Base URL the links point at
            ttl: Link lifetime
        """
        self.secret = secret
        self.public_base_url = public_base_url.rstrip("/")
        self.ttl = ttl

    def sign(self, reservation_id: str, action: ReservationStatus, now: datetime | None = None) -> str:
        """Create a token authorizing one action on one reservation.

        Args:
            reservation_id: Reservation identifier
            action: Status the link applies
            now: Issue time (defaults to now)

        Returns:
            str: Encoded JWT
        """
        issued_at = now or datetime.now(UTC)
        claims = {
            "sub": reservation_id,
            "action": action.value,
            "aud": ACTION_LINK_AUDIENCE,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(claims, self.secret, algorithm=ACTION_LINK_ALGORITHM)

    def build_url(self, reservation_id: str, action: ReservationStatus) -> str:
        """Build the full link for an action."""
        query = urlencode({"action": action.value, "token": self.sign(reservation_id, action)})
        return f"{self.public_base_url}/api/reservations-admin/{reservation_id}?{query}"

    def verify(self, token: str | None, reservation_id: str, action: ReservationStatus) -> bool:
        """Check that a token authorizes this action on this reservation.

        Args:
            token: Token from the link
            reservation_id: Reservation identifier from the path
            action: Requested action

        Returns:
            bool: True only for an authentic, unexpired, matching token
        """
        if not token:
            return False

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[ACTION_LINK_ALGORITHM],
                audience=ACTION_LINK_AUDIENCE,
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as e:
            logger.warning(f"Rejected reservation action token: {e!s}")
            return False

        return claims.get("sub") == reservation_id and claims.get("action") == action.value
