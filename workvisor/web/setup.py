import logging
from typing import Callable
from starlette.middleware import Middleware
from starlette.applications import Starlette
from workvisor.local.supervisor import Supervisor
from workvisor.web.middleware import ShutdownGuardMiddleware
from workvisor.web.routes import ControlAPI

log = logging.getLogger(__name__)


def create_app(supervisor: Supervisor, on_exit: Callable[[], None]) -> Starlette:
    """
    Builds the control interface application around a supervisor.

    :param supervisor: The supervisor every request operates on.
    :param on_exit: Called once the /exit response has been delivered.
    :return: The Starlette ASGI application.
    """
    api = ControlAPI(supervisor, on_exit)
    middleware = [
        Middleware(ShutdownGuardMiddleware),
    ]

    app = Starlette(debug=False, routes=api.routes(), middleware=middleware)
    app.state.exiting = False

    log.debug("Control interface application configured.")
    return app
