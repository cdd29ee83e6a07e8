"""
Result reporting.
"""

from .log_server import LogServerReporter

__all__ = ['LogServerReporter']
