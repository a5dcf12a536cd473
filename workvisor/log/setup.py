import logging
import sys

from workvisor.local.config import effective_settings as config
from workvisor.log.handler import LokiHandler

BASE_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
VERBOSE_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] [%(threadName)s] - %(message)s'


class MainFormatter(logging.Formatter):
    """
    The console formatter. Verbose mode adds the thread name, which tells
    apart the request handlers, output readers and reapers.
    """

    def __init__(self, verbose: bool = False):
        super().__init__(VERBOSE_FORMAT if verbose else BASE_FORMAT)


def setup_logging(console_level: int = logging.INFO) -> None:
    """
    Configures the root logger for the application.
    This sets up the console handler and optionally Loki, clearing any
    previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    #* --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter(verbose=console_level <= logging.DEBUG))
    root_logger.addHandler(console_handler)

    #* --- Loki Handler (conditional) ---
    if config.LOKI_ENABLED:
        try:
            loki_handler = LokiHandler(
                url=config.LOKI_URL,
                org_id=config.LOKI_ORG_ID,
                flush_interval=config.LOG_BUFFER_FLUSH_INTERVAL,
                batch_size=config.LOG_BUFFER_SIZE,
            )
            loki_handler.setLevel(logging.INFO)  # Avoid spamming Loki with DEBUG logs
            loki_handler.setFormatter(logging.Formatter(BASE_FORMAT))
            root_logger.addHandler(loki_handler)
            root_logger.info(f"Grafana Loki logging handler initialized for {config.LOKI_URL}.")
        except Exception as e:
            root_logger.error(f"Failed to initialize Grafana Loki logging handler: {e}")
