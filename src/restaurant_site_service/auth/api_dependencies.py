"""FastAPI dependencies for admin authentication.

Admin endpoints accept the session token as a bearer token or in the
session cookie.
"""

from fastapi import HTTPException

from restaurant_site_service.auth.session_validator import AdminSession, SessionValidator

SESSION_COOKIE_NAME = "session-token"
NOT_AUTHORIZED_MESSAGE = "You are not authorized to perform this action."


def extract_session_token(authorization: str | None, session_cookie: str | None) -> str | None:
    """Pick the session token from the Authorization header or the session cookie.

    Args:
        authorization: Raw Authorization header
        session_cookie: Raw session cookie value

    Returns:
        The token, or None when neither carries one
    """
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()

    return session_cookie or None


def get_admin_session(
    authorization: str | None,
    session_cookie: str | None,
    validator: SessionValidator,
) -> AdminSession:
    """Resolve the caller's admin session or reject the request.

    Args:
        authorization: Raw Authorization header
        session_cookie: Raw session cookie value
        validator: Session token validator

    Returns:
        AdminSession: The verified admin session

    Raises:
        HTTPException: 403 if the token is missing, invalid or expired, or does
            not identify an admin by email
    """
    token = extract_session_token(authorization, session_cookie)
    if token is None:
        raise HTTPException(status_code=403, detail=NOT_AUTHORIZED_MESSAGE)

    session = validator.decode(token)
    if session is None or not session.is_admin or not session.email:
        raise HTTPException(status_code=403, detail=NOT_AUTHORIZED_MESSAGE)

    return session
