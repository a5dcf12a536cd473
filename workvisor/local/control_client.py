import time
import logging
import requests
from typing import Optional, Tuple

log = logging.getLogger(__name__)

COMMANDS = ("start", "stop", "exit")


def _base_url(host: str, port: int) -> str:
    return f"http://{host}:{port}"


def fetch_status(host: str, port: int, retries: int = 5, delay: float = 0.5) -> Optional[str]:
    """
    Fetches the status of the supervised process from the control interface.

    Connection errors are retried, since the supervisor may still be binding its port.

    :param host: The host of the supervisor.
    :param port: The port of the supervisor.
    :param retries: Number of attempts before giving up.
    :param delay: Delay in seconds between attempts.
    :return: One of 'not_started', 'running', 'success', 'failed', or None on failure.
    """
    url = f"{_base_url(host, port)}/status"
    for attempt in range(retries):
        try:
            response = requests.get(url, timeout=2)
            response.raise_for_status()
            return response.json()["status"]
        except requests.exceptions.ConnectionError as e:
            log.debug(
                f"Could not connect to supervisor at '{url}' (attempt {attempt + 1}/{retries}): {e}. "
                f"Retrying in {delay}s..."
            )
            time.sleep(delay)
        except requests.exceptions.RequestException as e:
            log.error(f"Status request to '{url}' failed: {e}")
            return None
        except (ValueError, KeyError) as e:
            log.error(f"Malformed status response from supervisor: {e}")
            return None # Do not retry on malformed data

    log.error(f"Failed to reach supervisor at '{url}' after {retries} attempts.")
    return None


def fetch_logs(host: str, port: int) -> Optional[bytes]:
    """
    Fetches the combined output captured from the supervised process.

    :return: The raw output bytes, or None on failure.
    """
    url = f"{_base_url(host, port)}/log"
    try:
        response = requests.get(url, timeout=5)
        response.raise_for_status()
        return response.content
    except requests.exceptions.RequestException as e:
        log.error(f"Failed to fetch logs from supervisor: {e}")
        return None


def send_command(host: str, port: int, command: str) -> Tuple[bool, str]:
    """
    Posts a lifecycle command to the control interface.

    :param command: One of 'start', 'stop' or 'exit'.
    :return: A tuple of (success, message from the supervisor or the error).
    :raises ValueError: If the command is unknown.
    """
    if command not in COMMANDS:
        raise ValueError(f"Unknown command '{command}'. Expected one of: {', '.join(COMMANDS)}")

    url = f"{_base_url(host, port)}/{command}"
    try:
        response = requests.post(url, timeout=5)
    except requests.exceptions.RequestException as e:
        log.error(f"Failed to send '{command}' to supervisor: {e}")
        return False, str(e)

    message = response.text.strip()
    if not response.ok:
        log.warning(f"Supervisor rejected '{command}' ({response.status_code}): {message}")
        return False, message
    log.info(f"Supervisor accepted '{command}': {message}")
    return True, message
