"""
Ranking and storage engine for zipzap.

This package contains the store, the frecency scorer, the query matcher,
the legacy importer, and the DirectoryIndex facade that ties them together.
"""

from .index import DirectoryIndex
from .store import Store

__all__ = ['DirectoryIndex', 'Store']
