"""
Domain errors raised by the services. Each carries the HTTP status the API
layer answers with, so routes can re-raise them as HTTPException unchanged.
"""


class StockError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StockError):
    status_code = 400


class NotFoundError(StockError):
    status_code = 404


class DuplicateError(StockError):
    status_code = 400


class InsufficientStockError(StockError):
    """Raised when an assignment or stock-out asks for more than is left."""
    status_code = 400
