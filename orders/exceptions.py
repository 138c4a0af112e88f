"""
Exceptions raised by the orders services.
"""


class OrderError(Exception):
    """Base exception for order workflow errors."""

    code = 'error'
    http_status = 500

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class NotFoundError(OrderError):
    """Raised when a waiter, table, product, item or order does not exist."""

    code = 'not_found'
    http_status = 404


class InvalidOperationError(OrderError):
    """Raised when a business rule rejects the operation."""

    code = 'invalid_operation'
    http_status = 400

    def __init__(self, message, errors=None):
        self.errors = list(errors or [])
        super().__init__(message)
