"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input rejected by a domain rule (e.g. snooze days out of range)"""

    pass


class AggregatorError(DomainException):
    """Bank aggregation proxy returned an error or is unavailable"""

    pass
