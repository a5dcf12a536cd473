"""
Web package for workvisor.

This package contains the HTTP control interface: the route handlers that
call into the Supervisor, the application factory, middleware, and the
hypercorn runner.
"""

from .server import run_server
from .setup import create_app

__all__ = ["create_app", "run_server"]
