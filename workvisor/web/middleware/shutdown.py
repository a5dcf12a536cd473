import logging
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

log = logging.getLogger(__name__)


class ShutdownGuardMiddleware(BaseHTTPMiddleware):
    """Refuses every request that arrives after the supervisor was told to exit."""
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if getattr(request.app.state, "exiting", False):
            log.debug(f"Refusing {request.method} {request.url.path}: supervisor is shutting down.")
            return PlainTextResponse("Supervisor is shutting down", status_code=503)
        return await call_next(request)
