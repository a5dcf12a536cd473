import asyncio
import logging
from typing import Any, Callable, List
from starlette.routing import Route
from starlette.requests import Request
from starlette.background import BackgroundTask
from starlette.responses import JSONResponse, PlainTextResponse, Response
from workvisor.local.supervisor import Supervisor, SupervisorError

log = logging.getLogger(__name__)


class ControlAPI:
    """
    Maps control requests to Supervisor operations.

    The supervisor is injected at construction; each bound method is a
    Starlette endpoint. Supervisor calls run in the default executor so a
    contended lock never blocks the event loop.
    """

    def __init__(self, supervisor: Supervisor, on_exit: Callable[[], None]) -> None:
        """
        :param supervisor: The supervisor the requests operate on.
        :param on_exit: Called after the /exit response has been sent; ends the supervising process.
        """
        self.supervisor = supervisor
        self.on_exit = on_exit

    @staticmethod
    async def _call(func: Callable[[], Any]) -> Any:
        return await asyncio.get_running_loop().run_in_executor(None, func)

    async def status(self, request: Request) -> Response:
        status = await self._call(self.supervisor.status)
        log.info(f"API: /status requested. Current status: {status.value}")
        return JSONResponse({"status": status.value})

    async def start(self, request: Request) -> Response:
        try:
            await self._call(self.supervisor.start)
        except SupervisorError as e:
            log.warning(f"API: /start failed: {e}")
            return PlainTextResponse(str(e), status_code=400)

        log.info("API: /start successful.")
        return PlainTextResponse("Process started successfully.")

    async def stop(self, request: Request) -> Response:
        try:
            await self._call(self.supervisor.stop)
        except SupervisorError as e:
            log.warning(f"API: /stop failed: {e}")
            return PlainTextResponse(str(e), status_code=400)

        log.info("API: /stop successful.")
        return PlainTextResponse("Process stop signal sent.")

    async def logs(self, request: Request) -> Response:
        output = await self._call(self.supervisor.logs)
        log.info(f"API: /log requested. Returning {len(output)} bytes.")
        return Response(content=output, media_type="text/plain")

    async def info(self, request: Request) -> Response:
        snapshot = await self._call(self.supervisor.info)
        log.debug("API: /info requested.")
        return JSONResponse(snapshot)

    async def exit(self, request: Request) -> Response:
        """
        Stops the child on a best-effort basis, then ends the supervisor.

        The exit callback runs as a background task, i.e. only after the
        response has been sent. From here on the app refuses new requests.
        """
        try:
            await self._call(self.supervisor.stop)
        except SupervisorError as e:
            log.info(f"API: /exit could not stop the process: {e}")

        request.app.state.exiting = True
        log.warning("API: /exit requested. Supervisor is shutting down.")
        return PlainTextResponse("Process stop signal sent. Exit", background=BackgroundTask(self.on_exit))

    def routes(self) -> List[Route]:
        """Returns the route table. Write operations only accept POST."""
        return [
            Route("/status", endpoint=self.status, methods=["GET"]),
            Route("/log", endpoint=self.logs, methods=["GET"]),
            Route("/info", endpoint=self.info, methods=["GET"]),
            Route("/start", endpoint=self.start, methods=["POST"]),
            Route("/stop", endpoint=self.stop, methods=["POST"]),
            Route("/exit", endpoint=self.exit, methods=["POST"]),
        ]
