"""Session Middleware

Resolves the signed ``token`` cookie into ``request.state.user_id`` before the
GraphQL layer runs. A missing, tampered or expired cookie simply leaves the
request anonymous; resolvers that need a user raise UnauthenticatedException.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

import config
from utils.session_token import verify_session_token, SessionTokenError

logger = logging.getLogger(__name__)


class SessionMiddleware(BaseHTTPMiddleware):
    """Middleware that authenticates requests from the session cookie."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.user_id = None
        token = request.cookies.get(config.SESSION_COOKIE_NAME)
        if token:
            try:
                request.state.user_id = verify_session_token(token)
            except SessionTokenError as e:
                logger.info(f"Ignoring invalid session cookie: {e}")
        return await call_next(request)
