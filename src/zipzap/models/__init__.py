"""
Data models for zipzap.

This module contains the core data structures used throughout the system.
"""

from .entry import Entry, ImportResult
from .config import ZipzapConfig, CaseNormalization

__all__ = ['Entry', 'ImportResult', 'ZipzapConfig', 'CaseNormalization']
