"""
Bookstore: user accounts and a per-user book catalogue stored in JSON files.
"""

__version__ = "1.0.0"
