"""
Entry point scripts for processes started by or alongside the supervisor.
"""
