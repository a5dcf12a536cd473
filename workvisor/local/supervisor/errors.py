class SupervisorError(RuntimeError):
    """Base class for rejected or failed supervisor operations."""


class AlreadyRunningError(SupervisorError):
    def __init__(self) -> None:
        super().__init__("process is already running")


class NotRunningError(SupervisorError):
    def __init__(self) -> None:
        super().__init__("process is not running")


class SpawnError(SupervisorError):
    """The OS could not create the child process."""


class SignalError(SupervisorError):
    """The termination signal could not be delivered to the child."""
