"""
Finds duplicate files by scanning a directory tree, hashing every file, and
grouping the files whose hashes match.
"""

__version__ = "0.1.0"
