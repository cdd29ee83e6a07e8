"""
Common utilities for the curl speed test.
"""

from .storage_factory import create_storage_system

__all__ = ['create_storage_system']
