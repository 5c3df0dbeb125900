from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.service.dining.domain.value_object.restaurant_context import RestaurantContext
from src.service.dining.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_restaurant_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> RestaurantContext:
    """Bearer header first, then the access-token cookie"""
    token = credentials.credentials if credentials else request.cookies.get(jwt_auth.cookie_name)
    return jwt_auth.decode_context(token)


async def require_operator(
    context: RestaurantContext = Depends(get_restaurant_context),
) -> RestaurantContext:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'auth.require_operator',
        attributes={'restaurant.id': context.restaurant_id, 'staff.role': str(context.role)},
    ):
        if not context.is_operator:
            raise ForbiddenError('Only admins can perform this action')
        return context
