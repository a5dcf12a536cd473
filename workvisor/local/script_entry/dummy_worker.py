"""
A small worker executable for demonstrating and testing the supervisor.

It writes a start line to stdout and a sample line to stderr, performs a
number of timed work steps, and exits with a configurable code. With
--trap-sigterm it treats SIGTERM as a failure and exits with code 1.
"""
import setproctitle
setproctitle.setproctitle("Workvisor - DummyWorker")

import sys
import time
import signal
import argparse


def handle_shutdown_signal(signum, frame):
    """Exit with a failure code when asked to terminate."""
    print(f"stdout: Received signal {signum}, exiting with failure.", flush=True)
    sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(description="Dummy worker for workvisor.")
    parser.add_argument("--steps", type=int, default=5, help="Number of work steps")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds per work step")
    parser.add_argument("--exit-code", type=int, default=0, help="Exit code after the last step")
    parser.add_argument("--trap-sigterm", action="store_true", help="Exit with code 1 on SIGTERM")
    args = parser.parse_args()

    if args.trap_sigterm:
        signal.signal(signal.SIGTERM, handle_shutdown_signal)

    print("stdout: Dummy worker started successfully.", flush=True)
    sys.stderr.write("stderr: This is a sample error log.\n")
    sys.stderr.flush()

    for i in range(1, args.steps + 1):
        print(f"stdout: Worker is doing work... step {i}/{args.steps}", flush=True)
        time.sleep(args.interval)

    print("stdout: Dummy worker finished.", flush=True)
    sys.exit(args.exit_code)


if __name__ == "__main__":
    main()
