"""
zipzap - Core Package

A frecency-ranked index of visited directories that resolves partial,
multi-token queries to the single best matching directory.
"""

__version__ = "0.1.0"
__author__ = "zipzap Team"
