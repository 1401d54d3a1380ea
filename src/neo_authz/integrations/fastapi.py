"""FastAPI authorization dependencies.

Route handlers declare the capability they need; the dependency resolves the
authenticated user's internal id, takes the domain from a path parameter and
asks the engine. Denials surface as ``PermissionDeniedError`` and are rendered
by the handlers installed with ``register_exception_handlers``.
"""

import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from ..config.constants import Action, ResourceType, Role
from ..core.exceptions import NeoAuthzError, create_error_response, get_http_status_code
from ..core.validation import require_enum
from ..features.permissions.services import AuthorizationEngine

logger = logging.getLogger(__name__)

UserIdResolver = Callable[[Request], Union[Optional[str], Awaitable[Optional[str]]]]


class AuthorizationDependencies:
    """FastAPI authorization dependencies factory."""

    def __init__(
        self,
        engine: AuthorizationEngine,
        user_id_resolver: UserIdResolver,
        domain_param: str = "project_id"
    ):
        """Initialize authorization dependencies.

        Args:
            engine: Engine built at application startup
            user_id_resolver: Maps a request to the caller's internal user id,
                None when the request is unauthenticated
            domain_param: Path parameter holding the domain
        """
        self.engine = engine
        self.user_id_resolver = user_id_resolver
        self.domain_param = domain_param

    async def get_user_id(self, request: Request) -> str:
        """Resolve the caller's user id or reject with 401."""
        user_id = self.user_id_resolver(request)
        if inspect.isawaitable(user_id):
            user_id = await user_id
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Authentication required",
            )
        return user_id

    def get_domain(self, request: Request) -> Optional[str]:
        return request.path_params.get(self.domain_param)

    def require_access(self, resource_type: Union[str, ResourceType], action: Union[str, Action]):
        """Require ``action`` on ``resource_type`` in the request's domain."""
        resource_type = require_enum(ResourceType, resource_type, "resource_type")
        action = require_enum(Action, action, "action")

        async def dependency(request: Request) -> str:
            user_id = await self.get_user_id(request)
            domain = self.get_domain(request)
            try:
                await self.engine.manager.require_access(user_id, resource_type, action, domain)
            except NeoAuthzError as e:
                logger.warning(f"Access check failed in domain {domain}: {e.error_code}")
                raise
            return user_id

        return dependency

    def require_role(self, min_role: Union[str, Role]):
        """Require at least ``min_role`` in the request's domain."""
        min_role = require_enum(Role, min_role, "min_role")

        async def dependency(request: Request) -> str:
            user_id = await self.get_user_id(request)
            domain = self.get_domain(request)
            try:
                await self.engine.manager.require_role(user_id, domain, min_role)
            except NeoAuthzError as e:
                logger.warning(f"Role check failed in domain {domain}: {e.error_code}")
                raise
            return user_id

        return dependency


async def authz_exception_handler(request: Request, exc: NeoAuthzError) -> JSONResponse:
    return JSONResponse(
        status_code=get_http_status_code(exc),
        content=create_error_response(exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every NeoAuthzError as a structured JSON error response."""
    app.add_exception_handler(NeoAuthzError, authz_exception_handler)
