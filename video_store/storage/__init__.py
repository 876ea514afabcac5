"""
Storage module for the Video Store service.

This module keeps video and category metadata records.
"""

from .manager import MetadataStore

__all__ = ["MetadataStore"]
