from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

import psutil


class ProcessStatus(str, Enum):
    """The lifecycle states of the supervised process, valued by their wire names."""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class ProcessRecord:
    """
    The mutable state of one supervised process instance.

    The record is not synchronized on its own; the owning Supervisor guards
    every read and write with its lock.
    """

    def __init__(self, executable: str, arguments: Sequence[str] = ()) -> None:
        self._executable = str(executable)
        self._arguments: Tuple[str, ...] = tuple(str(arg) for arg in arguments)

        # Set only while status is RUNNING.
        self.handle: Optional[psutil.Popen] = None
        self.status = ProcessStatus.NOT_STARTED
        self.combined_output = bytearray()

        self.pid: Optional[int] = None
        self.exit_code: Optional[int] = None
        self.started_at: Optional[float] = None
        self.finished_at: Optional[float] = None
        self.runs = 0

    @property
    def executable(self) -> str:
        return self._executable

    @property
    def arguments(self) -> Tuple[str, ...]:
        return self._arguments

    @property
    def command(self) -> Tuple[str, ...]:
        """The full argv used to spawn the child."""
        return (self._executable,) + self._arguments

    def reset_for_run(self) -> None:
        """Discards everything that belonged to the previous run."""
        self.combined_output = bytearray()
        self.handle = None
        self.pid = None
        self.exit_code = None
        self.started_at = None
        self.finished_at = None

    def snapshot(self) -> Dict[str, Any]:
        """Returns a plain, serializable copy of the record."""
        return {
            "status": self.status.value,
            "executable": self._executable,
            "arguments": list(self._arguments),
            "pid": self.pid,
            "exit_code": self.exit_code,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "runs": self.runs,
            "output_bytes": len(self.combined_output),
        }
