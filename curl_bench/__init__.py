"""
Download throughput tests driven by curl, with results stored locally,
in object storage and on a log server.
"""

__version__ = "0.1.0"
