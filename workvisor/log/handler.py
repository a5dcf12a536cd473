import sys
import socket
import logging
import requests
import threading
from collections import deque
from typing import Any, Deque, Dict, List, Optional


class LokiHandler(logging.Handler):
    """
    A logging handler that ships the supervisor's own log records to a
    Grafana Loki instance in batches, using a background flush thread.
    """

    def __init__(self, url: str, org_id: Optional[str] = None, flush_interval: float = 10, batch_size: int = 200):
        """
        Initializes the Loki handler and starts its flush thread.

        :param url: The base URL of the Loki instance.
        :param org_id: The tenant ID for Loki, sent as 'X-Scope-OrgID'.
        :param flush_interval: Seconds between periodic flushes.
        :param batch_size: Number of buffered records that triggers an immediate flush.
        """
        super().__init__()
        self.url = f"{url.rstrip('/')}/loki/api/v1/push"
        self.org_id = org_id
        self.flush_interval = flush_interval
        self.batch_size = batch_size
        self.hostname = socket.gethostname() or "unknown-host"
        self.log_buffer: Deque[Dict[str, Any]] = deque()
        self.buffer_lock = threading.Lock()

        self.stop_event = threading.Event()
        self.flush_thread = threading.Thread(target=self._periodic_flush, daemon=True, name="LokiFlushThread")
        self.flush_thread.start()

    def _periodic_flush(self) -> None:
        """Flushes the buffer every `flush_interval` seconds until the handler is closed."""
        while not self.stop_event.wait(self.flush_interval):
            self.flush()
        # Final flush on stop
        self.flush()

    def emit(self, record: logging.LogRecord) -> None:
        """
        Formats a log record and adds it to the internal buffer.
        A full buffer is flushed right away.

        :param record: The log record to be processed.
        """
        try:
            log_entry = {
                "stream": {
                    "job": "workvisor",
                    "level": record.levelname.lower(),
                    "hostname": self.hostname,
                    "logger": record.name,
                },
                "values": [
                    [str(int(record.created * 1e9)), self.format(record)]
                ]
            }
        except Exception:
            self.handleError(record)
            return

        with self.buffer_lock:
            self.log_buffer.append(log_entry)
            is_full = len(self.log_buffer) >= self.batch_size
        if is_full:
            self.flush()

    def _take_buffer(self) -> List[Dict[str, Any]]:
        with self.buffer_lock:
            entries = list(self.log_buffer)
            self.log_buffer.clear()
        return entries

    def flush(self) -> None:
        """Sends all buffered records to Loki. The network call happens outside the buffer lock."""
        entries = self._take_buffer()
        if not entries:
            return

        headers = {'Content-Type': 'application/json'}
        if self.org_id:
            headers['X-Scope-OrgID'] = self.org_id

        # Failures go to stderr; logging them would feed them back into this handler.
        try:
            response = requests.post(self.url, json={"streams": entries}, headers=headers, timeout=5)
            # 204 No Content is the success status for Loki push
            if response.status_code != 204:
                print(f"ERROR: Loki returned non-204 status: {response.status_code} - {response.text}", file=sys.stderr)
        except requests.RequestException as e:
            print(f"CRITICAL: Failed to send {len(entries)} logs to Loki: {e}", file=sys.stderr)

    def close(self) -> None:
        """Stops the flush thread after a final flush."""
        self.stop_event.set()
        if self.flush_thread.is_alive():
            self.flush_thread.join(timeout=self.flush_interval + 2)
        super().close()
