"""
This module contains the default configuration settings for workvisor.
It defines the control interface binding, child process handling, logging
and client settings. Values can be overridden through the environment or a
`.env` file, and whitelisted keys through the JSON overrides file.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 't', 'yes', 'y')


#* --- Core Paths ---
BASE_DIR = pathlib.Path.cwd()
OVERRIDES_JSON_PATH = pathlib.Path(os.getenv("WORKVISOR_OVERRIDES", str(BASE_DIR / "workvisor.overrides.json")))

#* --- Control Interface Settings ---
SUPERVISOR_HOST = os.getenv("WORKVISOR_HOST", "0.0.0.0")
SUPERVISOR_PORT = int(os.getenv("WORKVISOR_PORT", "8080"))
GRACEFUL_SHUTDOWN_TIMEOUT = 5  # seconds hypercorn waits for open connections

#* --- Supervisor Settings ---
PROCESS_TITLE = "Workvisor - Supervisor"
AUTOSTART = _env_flag("WORKVISOR_AUTOSTART", "True")
ECHO_CHILD_OUTPUT = _env_flag("WORKVISOR_ECHO_CHILD_OUTPUT", "True")
OUTPUT_READ_CHUNK_SIZE = 4096  # bytes per read from the child's output pipe

#* --- Control Client Settings ---
CLIENT_RETRIES = 5
CLIENT_RETRY_DELAY = 0.5  # seconds

#* --- Logging ---
VERBOSE_LOGGING = _env_flag("WORKVISOR_VERBOSE", "False")

# Grafana Loki (for observability)
LOKI_ENABLED = _env_flag("LOKI_ENABLED", "False")
LOKI_URL = os.getenv("LOKI_URL", "http://localhost:3100")
LOKI_ORG_ID = os.getenv("LOKI_ORG_ID", "fake")

#* --- MODIFIABLE SETTINGS (Changeable through the overrides file) ---
MODIFIABLE_SETTINGS = {
    # Supervisor
    "AUTOSTART", "ECHO_CHILD_OUTPUT", "OUTPUT_READ_CHUNK_SIZE",
    # Control interface
    "GRACEFUL_SHUTDOWN_TIMEOUT",
    # Logging
    "LOG_BUFFER_SIZE", "LOG_BUFFER_FLUSH_INTERVAL",
    "LOKI_ENABLED", "LOKI_URL", "LOKI_ORG_ID",
}

#* --- Default Values for Modifiable Settings ---
LOG_BUFFER_SIZE = 200
LOG_BUFFER_FLUSH_INTERVAL = 10
