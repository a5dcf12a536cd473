import sys
import psutil
import logging
import threading
import subprocess
from typing import IO, Any, Callable, Dict, Sequence

log = logging.getLogger(__name__)


#* --- Process Creation ---
def _get_popen_creation_flags() -> Dict[str, Any]:
    """Returns platform-specific creation flags for subprocess.Popen."""
    if sys.platform == "win32":
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP | subprocess.CREATE_NO_WINDOW}
    # Keep the child out of the supervisor's session so a Ctrl+C aimed at the
    # supervisor's terminal does not reach it.
    return {"start_new_session": True}


def spawn_process(command: Sequence[str]) -> psutil.Popen:
    """
    Spawns the child with stdout and stderr sharing a single pipe.

    Sharing one pipe keeps the combined output in the exact order the child
    wrote it.

    :param command: The executable followed by its arguments.
    :return: The psutil-aware Popen handle of the new child.
    :raises OSError: If the OS could not create the process.
    """
    return psutil.Popen(
        list(command),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        **_get_popen_creation_flags()
    )


#* --- Output Capture ---
def _read_pipe(pipe: IO[bytes], chunk_size: int, on_chunk: Callable[[bytes], None]) -> None:
    """Target function for reader threads. Passes raw chunks from a pipe to `on_chunk` until EOF."""
    try:
        for chunk in iter(lambda: pipe.read1(chunk_size), b""):
            on_chunk(chunk)
    except (OSError, ValueError) as e:
        log.debug(f"Output reader exited early: {e}")
    finally:
        pipe.close()


def start_output_reader(
    process: psutil.Popen,
    chunk_size: int,
    on_chunk: Callable[[bytes], None]
) -> threading.Thread:
    """
    Starts a background thread that drains the child's combined output pipe.

    Draining the pipe continuously prevents it from filling up and blocking
    the child. Chunks are delivered as read, without any line splitting.

    :param process: The Popen handle whose stdout pipe is consumed.
    :param chunk_size: The maximum number of bytes delivered per chunk.
    :param on_chunk: Called with every chunk, in order.
    :return: The started reader thread.
    """
    reader = threading.Thread(
        target=_read_pipe,
        args=(process.stdout, chunk_size, on_chunk),
        daemon=True,
        name=f"OutputReader-{process.pid}"
    )
    reader.start()
    return reader


#* --- Process Status & Monitoring ---
def get_resource_usage(process: psutil.Popen) -> Dict[str, Any]:
    """
    Samples CPU and memory usage of a live child.

    :param process: The Popen handle to inspect.
    :return: The readings, or an empty dict if the process is gone or inaccessible.
    """
    try:
        # cpu_percent must sample outside oneshot(), which caches cpu times.
        cpu = process.cpu_percent(interval=0.1)
        with process.oneshot():
            return {
                "cpu_percent": cpu,
                "memory_rss": process.memory_info().rss,
                "num_threads": process.num_threads(),
            }
    except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
        log.debug(f"Could not sample resource usage for PID {process.pid}: {e}")
        return {}
