"""
API module for the Video Store service.

This module provides the REST API server for video upload, streaming and categories.
"""

from .server import APIServer

__all__ = ["APIServer"]
