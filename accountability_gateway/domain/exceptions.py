"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class RecordNotFoundError(DomainException):
    """Operation referenced a record id absent from the store"""

    pass


class ValidationFailedError(DomainException):
    """Input rejected before reaching the store (non-positive amounts, unknown labels)"""

    pass


class InvalidStateTransitionError(ValidationFailedError):
    """Requested status change is not allowed from the record's current status"""

    pass


class StoreUnavailableError(DomainException):
    """Record store returned an error or is unreachable"""

    pass


class ConfigurationError(DomainException):
    """Required configuration is missing; raised while wiring services"""

    pass
