"""
The `workvisorctl` command: a thin console over the control interface of a
running supervisor.
"""
import sys
import logging
import argparse
from typing import Callable, Dict, List, Optional

from workvisor.local import control_client
from workvisor.local.config import effective_settings as config

log = logging.getLogger(__name__)


def _show_status(host: str, port: int) -> bool:
    status = control_client.fetch_status(host, port, config.CLIENT_RETRIES, config.CLIENT_RETRY_DELAY)
    if status is None:
        print("Could not retrieve the process status.", file=sys.stderr)
        return False
    print(status)
    return True


def _show_logs(host: str, port: int) -> bool:
    output = control_client.fetch_logs(host, port)
    if output is None:
        print("Could not retrieve the process output.", file=sys.stderr)
        return False
    sys.stdout.buffer.write(output)
    sys.stdout.flush()
    return True


def _send(command: str) -> Callable[[str, int], bool]:
    def run(host: str, port: int) -> bool:
        ok, message = control_client.send_command(host, port, command)
        print(message, file=sys.stdout if ok else sys.stderr)
        return ok
    return run


COMMAND_MAP: Dict[str, Callable[[str, int], bool]] = {
    "status": _show_status,
    "log": _show_logs,
    "start": _send("start"),
    "stop": _send("stop"),
    "exit": _send("exit"),
}


def execute_command(command: str, host: str, port: int) -> bool:
    """
    Executes a single console command against a supervisor.

    :param command: The command name (e.g., 'status', 'stop').
    :return: True if the command succeeded, False otherwise.
    """
    log.debug(f"Executing command: {command} against {host}:{port}")
    return COMMAND_MAP[command](host, port)


def main(argv: Optional[List[str]] = None) -> None:
    """The entry point of the `workvisorctl` console."""
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
        stream=sys.stderr
    )
    parser = argparse.ArgumentParser(prog="workvisorctl", description="Control a running workvisor supervisor.")
    parser.add_argument("--host", default="127.0.0.1", help="Host of the supervisor")
    parser.add_argument("--port", "-p", type=int, default=config.SUPERVISOR_PORT, help="Port of the supervisor")
    parser.add_argument("command", choices=sorted(COMMAND_MAP), help="The command to run")
    args = parser.parse_args(argv)

    sys.exit(0 if execute_command(args.command, args.host, args.port) else 1)


if __name__ == "__main__":
    main()
