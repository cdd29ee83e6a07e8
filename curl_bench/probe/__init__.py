"""
curl probe and trace parsing.
"""

from .headers import parse_headers
from .runner import CurlProbe

__all__ = ['CurlProbe', 'parse_headers']
