"""
Logging module for the application.
This module provides the root logger setup and the optional Loki handler.
"""

from .handler import LokiHandler
from .setup import setup_logging

__all__ = ["setup_logging", "LokiHandler"]
