"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input to a domain function is malformed"""

    pass


class InvalidAmountError(ValidationError):
    """Amount is negative, NaN or infinite"""

    pass


class InvalidDateError(ValidationError):
    """Value is not a usable calendar date or timestamp"""

    pass


class InvalidFilterError(ValidationError):
    """Date filter criteria are incomplete or inconsistent"""

    pass


class RecordNotFoundError(DomainException):
    """Record does not exist or belongs to another user"""

    pass


class DuplicateUserError(DomainException):
    """An account with this email already exists"""

    pass


class AuthenticationError(DomainException):
    """Credentials or session are missing or invalid"""

    pass
