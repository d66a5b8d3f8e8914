"""
SplitEase - shared expense tracking and settlement planning.
"""

__version__ = "1.0.0"
