"""
File storage adapters.
"""

from flashai.boundary.storage.local_storage import LocalDocumentStorage

__all__ = ["LocalDocumentStorage"]
