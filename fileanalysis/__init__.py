"""
FileAnalysis - scan a directory tree and report matching files grouped by owner.
"""

__version__ = "1.0.0"
