# educk/api/deps.py
from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from educk.domain.enums import Role
from educk.domain.pricing import CouponRegistry
from educk.utils.settings import COUPONS, JWT_SECRET, JWT_ALGORITHM
from educk.utils.logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """Reads the bearer token. Tokens are issued by the auth service, here they are only verified."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Authentication token not provided")

    try:
        claims = jwt.decode(credentials.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected token: {e}")
        raise HTTPException(status_code=401, detail="Invalid token")

    try:
        return CurrentUser(id=int(claims["sub"]), role=Role(claims.get("role", Role.STUDENT.value)))
    except (KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")


def require_roles(*roles: Role):
    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Access denied")
        return user

    return dependency


require_teacher = require_roles(Role.TEACHER, Role.ADMIN)
require_admin = require_roles(Role.ADMIN)


def get_coupon_registry() -> CouponRegistry:
    return CouponRegistry(COUPONS)
