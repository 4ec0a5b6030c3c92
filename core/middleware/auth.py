"""
Acting user middleware.

Resolves the user on whose behalf an inventory request runs from the
X-Username and X-User-Role headers set by the fronting identity proxy.
"""

import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.value_objects import ActingUser, UserRole

logger = logging.getLogger(__name__)

PROTECTED_PREFIXES = ("/api/v1/inventory/",)


class ActingUserMiddleware(MiddlewareMixin):
    """
    Middleware for acting user resolution.

    This middleware:
    1. Builds an ActingUser from X-Username and X-User-Role
    2. Attaches it to the request as ``acting_user``
    3. Returns 401 Unauthorized for inventory APIs without a username
    """

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and resolve the acting user.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if the username is missing, None otherwise
        """
        request.acting_user = self._resolve_user(request)  # type: ignore

        if request.acting_user is None and request.path.startswith(PROTECTED_PREFIXES):
            logger.warning("Inventory request without username: %s", request.path)
            return JsonResponse(
                {
                    "error": {
                        "code": "AUTHENTICATION_REQUIRED",
                        "message": "Missing username. Provide X-Username header.",
                    }
                },
                status=401,
            )
        return None

    def _resolve_user(self, request: HttpRequest) -> Optional[ActingUser]:
        username = request.headers.get("X-Username", "").strip()
        if not username:
            return None
        role = UserRole.parse(request.headers.get("X-User-Role"))
        return ActingUser(username=username, role=role)
