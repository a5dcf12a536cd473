import sys
import asyncio
import logging
import argparse
import setproctitle
from pathlib import Path
from typing import List, Optional

from workvisor.local.config import effective_settings as config
from workvisor.local.supervisor import Supervisor, SupervisorError
from workvisor.log.setup import setup_logging
from workvisor.web.server import run_server

log = logging.getLogger("workvisor")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses the command line.

    Everything after the executable path is forwarded verbatim to the child,
    including arguments that look like options.
    """
    parser = argparse.ArgumentParser(
        prog="workvisor",
        description="Supervise an executable and control it over HTTP.",
    )
    parser.add_argument("--host", default=config.SUPERVISOR_HOST, help="Interface for the control server")
    parser.add_argument("--port", "-p", type=int, default=config.SUPERVISOR_PORT, help="Port for the control server")
    parser.add_argument("--no-autostart", dest="autostart", action="store_false", default=config.AUTOSTART,
                        help="Do not start the executable until /start is called")
    parser.add_argument("--verbose", "-v", action="store_true", default=config.VERBOSE_LOGGING,
                        help="Enable DEBUG console logging")
    parser.add_argument("executable", help="Path of the executable to supervise")
    parser.add_argument("arguments", nargs=argparse.REMAINDER, help="Arguments passed to the executable")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    """The main entry point of the supervisor."""
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    executable = Path(args.executable)
    if not executable.exists():
        log.critical(f"Executable file not found at: {executable}")
        sys.exit(1)

    setproctitle.setproctitle(config.PROCESS_TITLE)
    log.info(f"Managing executable: {executable} with args: {args.arguments}")

    echo = getattr(sys.stdout, "buffer", None) if config.ECHO_CHILD_OUTPUT else None
    supervisor = Supervisor(str(executable), args.arguments, echo=echo, chunk_size=config.OUTPUT_READ_CHUNK_SIZE)

    if args.autostart:
        try:
            supervisor.start()
        except SupervisorError as e:
            log.error(f"Initial start failed: {e}")

    try:
        asyncio.run(run_server(supervisor, args.host, args.port, config.GRACEFUL_SHUTDOWN_TIMEOUT))
    except OSError as e:
        log.critical(f"Failed to start server: {e}")
        sys.exit(1)

    log.info("Supervisor exiting.")
    sys.exit(0)


if __name__ == "__main__":
    main()
