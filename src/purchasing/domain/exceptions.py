"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EmptySelectionError(ValidationError):
    """A purchase order was requested from zero source orders."""


class EmptyReceiptError(ValidationError):
    """A receipt has no receiver identity or nothing to receive."""


class OverReceiptError(ValidationError):
    """More units were received than remain outstanding."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""
