"""
Restaurant context from a signed JWT

Tokens are issued by the account service; this service only verifies the
signature and reads two claims: `restaurant_id` and `role` (ADMIN | STAFF).
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from src.platform.config.core_setting import Settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.dining.domain.enum.staff_role import StaffRole
from src.service.dining.domain.value_object.restaurant_context import RestaurantContext


class JwtAuth:
    def __init__(self, *, settings: Settings) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.cookie_name = settings.ACCESS_TOKEN_COOKIE_NAME
        self.token_expire_days = 7

    def create_jwt_token(self, *, restaurant_id: int, role: StaffRole) -> str:
        """Used by local tooling and tests; production tokens come from the account service"""
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(restaurant_id),
            'iat': now,
            'exp': now + timedelta(days=self.token_expire_days),
            'restaurant_id': restaurant_id,
            'role': str(role),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_context(self, token: Optional[str]) -> RestaurantContext:
        if not token:
            raise AuthenticationError('Not authenticated')
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            raise AuthenticationError('Invalid token')

        restaurant_id = payload.get('restaurant_id')
        role = payload.get('role')
        if not isinstance(restaurant_id, int) or role not in {r.value for r in StaffRole}:
            raise AuthenticationError('Invalid token')
        return RestaurantContext(restaurant_id=restaurant_id, role=StaffRole(role))
