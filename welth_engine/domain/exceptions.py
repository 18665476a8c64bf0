"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransactionDataError(DomainException):
    """Ledger record violates the data model (missing date, unknown type, negative amount)"""

    pass


class ProfileNotFoundError(DomainException):
    """User has not completed the personality quiz yet"""

    pass


class AlertDeliveryError(DomainException):
    """Notification sink rejected the alert after all retries"""

    pass


class InvalidTransferError(DomainException):
    """Auto-savings transfer whose source is missing or is the savings account itself"""

    pass
