"""Domain error taxonomy.

Every error raised by the domain layer derives from DomainError. Errors are
raised synchronously to the immediate caller and never leave an entity in a
partially mutated state.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainError, ValueError):
    """A field is malformed or out of range."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}


class IllegalStateError(DomainError):
    """An operation was attempted from the wrong lifecycle state."""


class NotFoundError(DomainError, LookupError):
    """A referenced member or entity does not exist."""


class DuplicateMemberError(DomainError):
    """A member is already part of a collection that forbids duplicates."""


class ConcurrentModificationError(DomainError):
    """The aggregate was saved by another writer since it was loaded."""
