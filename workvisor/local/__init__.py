"""
Local package for workvisor.

This package provides the effective configuration, the supervisor that owns
the child process, and the client side of the control interface.
"""

from .config import effective_settings

__all__ = ["effective_settings"]
