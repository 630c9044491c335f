"""
Store registry.

Assignment and enrollment store implementations register themselves by
name so the configured backend can be picked without modifying factory
code.

Usage:
    @AuthRegistry.assignment_store("my_store")
    class MyAssignmentStore(AssignmentStore):
        ...

    # Later, get by name:
    store = AuthRegistry.get_assignment_store("my_store", db=session)
"""

from typing import Type, Callable, Any
from .interfaces import AssignmentStore, EnrollmentStore


class AuthRegistry:
    """
    Central registry for store backends.

    Backends register themselves using decorators.
    """

    _assignment_stores: dict[str, Type[AssignmentStore]] = {}
    _enrollment_stores: dict[str, Type[EnrollmentStore]] = {}

    # ============================================================
    # REGISTRATION DECORATORS
    # ============================================================

    @classmethod
    def assignment_store(cls, name: str) -> Callable[[Type[AssignmentStore]], Type[AssignmentStore]]:
        """
        Decorator to register an assignment store.

        Usage:
            @AuthRegistry.assignment_store("database")
            class DatabaseAssignmentStore(AssignmentStore):
                ...
        """
        def decorator(store_class: Type[AssignmentStore]) -> Type[AssignmentStore]:
            cls._assignment_stores[name] = store_class
            return store_class
        return decorator

    @classmethod
    def enrollment_store(cls, name: str) -> Callable[[Type[EnrollmentStore]], Type[EnrollmentStore]]:
        """Decorator to register an enrollment store."""
        def decorator(store_class: Type[EnrollmentStore]) -> Type[EnrollmentStore]:
            cls._enrollment_stores[name] = store_class
            return store_class
        return decorator

    # ============================================================
    # GETTERS
    # ============================================================

    @classmethod
    def get_assignment_store(cls, name: str, **kwargs: Any) -> AssignmentStore:
        """
        Get an assignment store by name.

        Args:
            name: Registered name of the store
            **kwargs: Arguments to pass to store constructor

        Raises:
            ValueError: If store not found
        """
        store_class = cls._assignment_stores.get(name)
        if not store_class:
            available = list(cls._assignment_stores.keys())
            raise ValueError(
                f"Unknown assignment store: '{name}'. "
                f"Available: {available}"
            )
        return store_class(**kwargs)

    @classmethod
    def get_enrollment_store(cls, name: str, **kwargs: Any) -> EnrollmentStore:
        """
        Get an enrollment store by name.

        Raises:
            ValueError: If store not found
        """
        store_class = cls._enrollment_stores.get(name)
        if not store_class:
            available = list(cls._enrollment_stores.keys())
            raise ValueError(
                f"Unknown enrollment store: '{name}'. "
                f"Available: {available}"
            )
        return store_class(**kwargs)

    # ============================================================
    # INTROSPECTION
    # ============================================================

    @classmethod
    def list_assignment_stores(cls) -> list[str]:
        """List all registered assignment store names."""
        return list(cls._assignment_stores.keys())

    @classmethod
    def list_enrollment_stores(cls) -> list[str]:
        """List all registered enrollment store names."""
        return list(cls._enrollment_stores.keys())

    @classmethod
    def has_assignment_store(cls, name: str) -> bool:
        """Check if an assignment store is registered."""
        return name in cls._assignment_stores

    @classmethod
    def has_enrollment_store(cls, name: str) -> bool:
        """Check if an enrollment store is registered."""
        return name in cls._enrollment_stores
