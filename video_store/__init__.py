"""
Video Store

A video upload and streaming service: uploads are validated, stored under
unique sanitized names, given a thumbnail and served back with HTTP range
support.
"""

__version__ = "1.0.0"

from .main import VideoStoreSystem

__all__ = ["VideoStoreSystem"]
