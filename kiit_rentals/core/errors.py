"""
Service Errors

Services raise these instead of HTTPException. The application's exception
handlers are the only place that turns them into status codes.
"""


class RentalsError(Exception):
    """Base class for errors whose message is safe to show to the client"""

    default_message = "Server Error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(RentalsError):
    default_message = "Invalid request"


class ConflictError(RentalsError):
    default_message = "Resource already exists"


class AuthenticationError(RentalsError):
    default_message = "Not authorized"


class ForbiddenError(RentalsError):
    default_message = "You can only modify your own listings"


class NotFoundError(RentalsError):
    default_message = "Not found"


class InvalidIdError(NotFoundError):
    default_message = "Invalid Product Id"


class InternalError(RentalsError):
    default_message = "Server Error"
