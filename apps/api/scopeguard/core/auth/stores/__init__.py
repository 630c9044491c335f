"""
Store implementations.

Available stores (for both assignments and enrollments):
- database: SQLAlchemy async session (default)
- memory: in-process, for development and tests
"""

from .database import DatabaseAssignmentStore, DatabaseEnrollmentStore
from .memory import MemoryAssignmentStore, MemoryEnrollmentStore
from .seed import MemorySeed

__all__ = [
    "DatabaseAssignmentStore",
    "DatabaseEnrollmentStore",
    "MemoryAssignmentStore",
    "MemoryEnrollmentStore",
    "MemorySeed",
]
