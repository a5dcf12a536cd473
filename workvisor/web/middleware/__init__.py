"""
Middleware package for the control interface.

This package contains middleware classes wrapped around the Starlette
application that serves the control routes.
"""

from .shutdown import ShutdownGuardMiddleware

__all__ = ["ShutdownGuardMiddleware"]
