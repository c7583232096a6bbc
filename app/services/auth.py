"""Login flow: look up the user, verify the password, issue a token."""

import logging

from sqlalchemy.orm import Session

from app.core.errors import AuthenticationFailure
from app.core.security import TokenService, burn_password_check, verify_password
from app.schemas.auth import LoginResponse
from app.services.credentials import find_credential

logger = logging.getLogger(__name__)


def authenticate(
    db: Session,
    tokens: TokenService,
    username: str,
    password: str,
) -> LoginResponse:
    """
    Exchange username and password for a bearer token.

    Unknown username and wrong password both raise AuthenticationFailure with the
    same message, and both cost one bcrypt check, so callers cannot enumerate users.
    """
    credential = find_credential(db, username)
    if credential is None:
        burn_password_check(password)
        logger.warning("Authentication failed for user: %s", username)
        raise AuthenticationFailure()
    if not verify_password(password, credential.password_hash):
        logger.warning("Authentication failed for user: %s", username)
        raise AuthenticationFailure()

    token = tokens.issue(credential.username, credential.roles)
    logger.info("User %s authenticated", credential.username)
    return LoginResponse(
        token=token,
        username=credential.username,
        roles=sorted(credential.roles),
    )
