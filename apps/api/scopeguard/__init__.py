"""
Scoped-role authorization for course sections.
"""

__version__ = "0.1.0"
