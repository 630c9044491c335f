"""
Utility modules.
"""
