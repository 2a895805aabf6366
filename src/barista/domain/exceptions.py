"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the application layer can catch them uniformly and turn them into typed
turn errors, and the CLI can display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A value failed validation (bad id, negative money, blank name...)."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InvalidOrderState(DomainException):
    """An order operation was attempted outside its legal state."""


class OrderLimitExceeded(DomainException):
    """The order's total quantity cap would be exceeded."""


class ItemNotFound(DomainException):
    """A removal or quantity update targeted a line item that is not there."""
