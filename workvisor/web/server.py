import signal
import asyncio
import logging
from hypercorn.config import Config
from hypercorn.asyncio import serve
from workvisor.local.supervisor import Supervisor, SupervisorError
from workvisor.web.setup import create_app

log = logging.getLogger(__name__)


def build_hypercorn_config(host: str, port: int, graceful_timeout: float) -> Config:
    """Returns the hypercorn configuration for the control interface."""
    hypercorn_config = Config()
    hypercorn_config.bind = [f"{host}:{port}"]
    hypercorn_config.graceful_timeout = graceful_timeout
    hypercorn_config.accesslog = None
    # Route hypercorn's own messages through the application's handlers.
    hypercorn_config.errorlog = logging.getLogger("hypercorn.error")
    return hypercorn_config


async def run_server(supervisor: Supervisor, host: str, port: int, graceful_timeout: float = 5) -> None:
    """
    Serves the control interface until /exit is called or a termination signal arrives.

    :param supervisor: The supervisor exposed by the control interface.
    :param host: The interface to bind to.
    :param port: The port to bind to.
    :param graceful_timeout: Seconds hypercorn waits for open connections on shutdown.
    :raises OSError: If the port cannot be bound.
    """
    loop = asyncio.get_running_loop()
    shutdown_event = asyncio.Event()

    def request_shutdown() -> None:
        # May be called from a worker thread.
        loop.call_soon_threadsafe(shutdown_event.set)

    def handle_signal(sig: signal.Signals) -> None:
        log.warning(f"Received {sig.name}. Stopping the process and shutting down.")
        try:
            supervisor.stop()
        except SupervisorError as e:
            log.info(f"No process to stop on shutdown: {e}")
        shutdown_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, handle_signal, sig)
        except NotImplementedError:
            log.debug(f"Signal handlers are not supported on this platform; {sig.name} will not be handled.")

    app = create_app(supervisor, on_exit=request_shutdown)
    log.info(f"Starting server on {host}:{port}...")
    await serve(app, build_hypercorn_config(host, port, graceful_timeout), shutdown_trigger=shutdown_event.wait)
    log.info("Control interface stopped.")
