"""
Note Tree - a terminal note manager for short and long notes.

Notes are kept as a tree: detailed (long) notes can own nested sub-notes,
which are edited through the same menu as the top-level collection.
"""

__version__ = "0.1.0"
