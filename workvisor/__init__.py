"""
workvisor: supervises a single external executable and exposes its lifecycle
(start, stop, status, captured output) over an HTTP control interface.
"""

__version__ = "0.1.0"
