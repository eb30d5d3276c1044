"""Domain-specific exceptions for the POS order engine.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from PosEngineError for easy catching.
"""


class PosEngineError(Exception):
    """Base exception for all POS order engine errors.

    Callers can catch this exception to handle any engine error while still
    distinguishing a failed commit from a successful one.
    """

    pass


class ConfigError(PosEngineError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided (negative tax rate, zero retries)
    - An environment variable cannot be parsed
    """

    pass


class InvalidCartError(PosEngineError):
    """Raised when a cart fails validation before checkout.

    This exception is raised when:
    - The cart is empty
    - A line has a quantity below 1 or a negative unit price
    - A modifier selection does not match its modifier group
    - The payment method is missing

    No storage mutation is attempted when this error is raised.
    """

    pass


class InvalidRangeError(PosEngineError):
    """Raised when a report date filter is malformed.

    This exception is raised when:
    - A date string is not in YYYY-MM-DD format
    - The start date is after the end date
    """

    pass


class PersistenceError(PosEngineError):
    """Raised when the storage layer fails.

    This exception is raised when:
    - The database file cannot be opened or written
    - An integrity or lock conflict persists after the bounded retries

    The store is always left in its pre-commit state.
    """

    pass


class NotFoundError(PosEngineError):
    """Raised when a lookup by identifier finds nothing."""

    pass
