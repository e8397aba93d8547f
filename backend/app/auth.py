"""
Bearer-token authentication for FastAPI routes.

Verifies the access token issued by /auth/login and resolves it to the
stored user. Every project and task route depends on `get_current_user`.
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.exceptions import UnauthorizedError
from app.logging_config import get_logger
from app.models import User
from app.routes.deps import get_user_service
from app.services.users import UserService

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    users: UserService = Depends(get_user_service),
) -> User:
    """
    Verify the bearer token and return the authenticated user.

    Raises:
        UnauthorizedError: If the token is missing, invalid, expired or
            belongs to a user that no longer exists.
    """
    if not credentials or not credentials.credentials:
        raise UnauthorizedError("You need to login before using the API")

    user = await users.authenticate(credentials.credentials)
    if user is None:
        logger.warning("Rejected bearer token")
        raise UnauthorizedError("Invalid authentication token")

    logger.debug(f"Authenticated user: {user.id} ({user.email})")
    return user
