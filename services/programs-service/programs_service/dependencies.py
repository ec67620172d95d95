from fastapi import Request
from sentry_sdk import set_tag, set_user

from .exceptions import UnauthorizedException


async def get_current_user_id(request: Request) -> str:
    """Extract user_id from X-User-Id header."""
    user_id = request.headers.get("X-User-Id")
    if not user_id:
        raise UnauthorizedException()
    set_user({"id": str(user_id)})
    set_tag("service", "programs-service")
    return user_id
