"""
exceptions.py — Domain error taxonomy

Services raise these; main.py renders them as the shared ErrorResponse
envelope with the HTTP status carried on each class.

Called by: app/services/*, app/database.py, app/main.py (handlers)
Depends on: nothing
"""


class MarketplaceError(Exception):
    """Base class for every error a caller is allowed to see."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    status_code = 400


class UnauthorizedError(MarketplaceError):
    status_code = 401


class NotFoundError(MarketplaceError):
    status_code = 404


class ConflictError(MarketplaceError):
    status_code = 409


class InternalError(MarketplaceError):
    status_code = 500


class DatabaseNotConnectedError(InternalError):
    """The store was used before Database.connect() or after close()."""

    def __init__(self, message: str = "Database is not connected"):
        super().__init__(message)
