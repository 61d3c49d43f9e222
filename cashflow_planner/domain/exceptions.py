"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnknownFrequencyError(DomainException):
    """Recurrence frequency is not one of the supported values"""

    pass


class InvalidDateRangeError(DomainException):
    """Date window ends before it starts"""

    pass


class InvalidGoalError(DomainException):
    """Net worth goal target is not a positive amount"""

    pass


class AccountNotFoundError(DomainException):
    """Account does not exist or belongs to another user"""

    pass


class EventNotFoundError(DomainException):
    """Event does not exist or belongs to another user"""

    pass


class GoalNotSetError(DomainException):
    """User has no net worth goal"""

    pass
