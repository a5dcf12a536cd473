"""
The Supervisor package.
Manages the lifecycle of the single supervised child process.

This package contains the Supervisor class, the ProcessRecord it guards,
the error taxonomy of its operations and the low-level process helpers.
"""
from .errors import AlreadyRunningError, NotRunningError, SignalError, SpawnError, SupervisorError
from .record import ProcessRecord, ProcessStatus
from .supervisor import Supervisor

__all__ = [
    'Supervisor', 'ProcessRecord', 'ProcessStatus',
    'SupervisorError', 'AlreadyRunningError', 'NotRunningError', 'SpawnError', 'SignalError',
]
