# -*- coding: utf-8 -*-

"""
str/bytes conversion and URL helpers shared across the package.
"""

from urllib.parse import quote as urlquote, unquote as urlunquote
from urllib.parse import urlparse


def to_bytes(data):
    """Covert to UTF-8 encoding if the input is unicode; otherwise return the original data."""
    if isinstance(data, str):
        return data.encode(encoding='utf-8')
    else:
        return data


def to_string(data):
    """Convert the input to unicode if it's utf-8 bytes."""
    if isinstance(data, bytes):
        return data.decode('utf-8')
    else:
        return data
