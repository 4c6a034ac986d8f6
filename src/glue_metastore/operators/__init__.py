"""
Operators exposing catalog operations.
"""

from .metastore import GlueMetastore

__all__ = ["GlueMetastore"]
