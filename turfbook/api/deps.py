from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from typing import Optional

from ..core.config import settings
from ..core.database import get_redis
from ..core.exceptions import AuthError, ForbiddenError
from ..core.security import security, verify_token, Identity, UserRole


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Identity:
    """Extract and verify the bearer token from the Authorization header."""
    if credentials is None:
        raise AuthError("Authorization token missing")

    token_payload = verify_token(credentials.credentials)
    if not token_payload or not token_payload.sub or not token_payload.role:
        raise AuthError("Invalid or expired token")

    try:
        return Identity(
            user_id=int(token_payload.sub),
            role=token_payload.role,
            name=token_payload.name,
        )
    except ValueError:
        raise AuthError("Invalid token payload")


# Role-based access control dependencies
def require_role(*allowed_roles: UserRole):
    """Create a dependency that authenticates, then requires one of the roles."""
    async def role_checker(
        identity: Identity = Depends(get_current_identity)
    ) -> Identity:
        if identity.role not in allowed_roles:
            raise ForbiddenError(
                f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return identity

    return role_checker


get_admin_identity = require_role(UserRole.ADMIN)


# Rate limiting dependency
def otp_rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Limit one-time-code requests per client within an hour window."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"otp_rate_limit:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, 3600, 1)
    else:
        if int(current_requests) >= settings.OTP_REQUESTS_PER_HOUR:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
