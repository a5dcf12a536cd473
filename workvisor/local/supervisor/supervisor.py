import time
import psutil
import logging
import threading
from typing import Any, BinaryIO, Dict, Optional, Sequence

from workvisor.local.supervisor import process_utils
from workvisor.local.supervisor.errors import AlreadyRunningError, NotRunningError, SignalError, SpawnError
from workvisor.local.supervisor.record import ProcessRecord, ProcessStatus

log = logging.getLogger(__name__)


class Supervisor:
    """
    Manages the lifecycle of a single child process.

    The supervisor owns one ProcessRecord. Every read or write of the record
    happens under `self._lock`. Waiting for the child to exit is done by a
    reaper thread outside the lock, so a long-running child never stalls
    status or log requests.
    """

    def __init__(
        self,
        executable: str,
        arguments: Sequence[str] = (),
        echo: Optional[BinaryIO] = None,
        chunk_size: int = 4096
    ) -> None:
        """
        Initializes the supervisor with a record in the NOT_STARTED state.

        :param executable: Path to the binary to supervise.
        :param arguments: Arguments passed verbatim to the binary.
        :param echo: Optional binary stream that receives the child's output live.
        :param chunk_size: Maximum bytes read from the output pipe at once.
        """
        self._record = ProcessRecord(executable, arguments)
        self._lock = threading.Lock()
        self._echo = echo
        self._chunk_size = chunk_size

    @property
    def executable(self) -> str:
        return self._record.executable

    @property
    def arguments(self) -> Sequence[str]:
        return self._record.arguments

    def start(self) -> None:
        """
        Launches the executable and hands it off to a reaper thread.

        :raises AlreadyRunningError: If the child is currently running. State is untouched.
        :raises SpawnError: If the OS could not create the child. Status becomes FAILED.
        """
        with self._lock:
            record = self._record
            if record.status == ProcessStatus.RUNNING:
                log.warning("Start rejected: process is already running.")
                raise AlreadyRunningError()

            record.reset_for_run()
            output = record.combined_output
            try:
                process = process_utils.spawn_process(record.command)
            except OSError as e:
                record.status = ProcessStatus.FAILED
                record.finished_at = time.time()
                log.error(f"Failed to start process '{record.executable}': {e}")
                raise SpawnError(f"failed to start process: {e}") from e

            record.handle = process
            record.pid = process.pid
            record.started_at = time.time()
            record.status = ProcessStatus.RUNNING
            record.runs += 1

            # The reader and reaper capture this run's buffer and handle, never the shared fields.
            reader = process_utils.start_output_reader(
                process, self._chunk_size, lambda chunk: self._capture(output, chunk)
            )
            threading.Thread(
                target=self._reap,
                args=(process, reader),
                daemon=True,
                name=f"Reaper-{process.pid}"
            ).start()

            log.info(f"Started process '{record.executable} {list(record.arguments)}' with PID: {process.pid}")

    def _capture(self, output: bytearray, chunk: bytes) -> None:
        """Appends a chunk to its run's output buffer and forwards it to the echo stream."""
        with self._lock:
            output.extend(chunk)

        if self._echo is None:
            return
        try:
            self._echo.write(chunk)
            self._echo.flush()
        except (OSError, ValueError) as e:
            log.debug(f"Could not forward child output: {e}")

    def _reap(self, process: psutil.Popen, reader: threading.Thread) -> None:
        """
        Waits for the child to terminate and commits its terminal status.

        Runs once per successful spawn. It commits only if the record still
        refers to the handle it was started for.
        """
        returncode: Optional[int]
        try:
            returncode = process.wait()
        except (OSError, psutil.Error) as e:
            log.error(f"Process wait failed with error: {e}")
            returncode = None

        # The output is complete once the pipe reaches EOF.
        reader.join()

        with self._lock:
            record = self._record
            if record.handle is not process:
                log.warning(f"Discarding exit of stale run with PID {process.pid}.")
                return

            record.handle = None
            record.exit_code = int(returncode) if returncode is not None else None
            record.finished_at = time.time()
            if record.exit_code == 0:
                record.status = ProcessStatus.SUCCESS
                log.info("Process exited successfully.")
            else:
                record.status = ProcessStatus.FAILED
                log.warning(f"Process with PID {process.pid} failed. Exit code: {record.exit_code}")

    def stop(self) -> None:
        """
        Asks the running child to terminate with SIGTERM.

        The status is not changed here; the reaper records the exit.

        :raises NotRunningError: If no child is running. No signal is sent.
        :raises SignalError: If the signal could not be delivered. The status stays RUNNING.
        """
        with self._lock:
            record = self._record
            if record.status != ProcessStatus.RUNNING:
                log.warning("Stop rejected: process is not running.")
                raise NotRunningError()

            process = record.handle
            try:
                process.terminate()
            except (psutil.Error, OSError) as e:
                log.error(f"Failed to send SIGTERM to process with PID {process.pid}: {e}")
                raise SignalError(f"failed to send SIGTERM to process: {e}") from e

            log.info(f"Sent SIGTERM to process with PID: {process.pid}")

    def status(self) -> ProcessStatus:
        """Returns the current status of the process."""
        with self._lock:
            return self._record.status

    def logs(self) -> bytes:
        """Returns all output captured from the current or most recent run."""
        with self._lock:
            return bytes(self._record.combined_output)

    def info(self) -> Dict[str, Any]:
        """
        Returns a snapshot of the record, plus resource usage while the child runs.

        The psutil sampling happens outside the lock.
        """
        with self._lock:
            snapshot = self._record.snapshot()
            process = self._record.handle

        if process is not None:
            snapshot.update(process_utils.get_resource_usage(process))
        return snapshot
