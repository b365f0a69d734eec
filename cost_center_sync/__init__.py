"""
Cost center membership sync for GitHub Enterprise.
"""

__version__ = "1.0.0"
