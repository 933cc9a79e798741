from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto a structured HTTP error response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"
    default_message: str = "An internal server error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return error_body(self.status_code, self.error, self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Validation Error"
    default_message = "Invalid request"


# Duplicate email is reported as 400, not 409.
class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Registration Error"
    default_message = "Resource already exists"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"
    default_message = "Invalid or missing token"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"
    default_message = "Resource not found"


class InternalError(AppError):
    pass


def error_body(status_code: int, error: str, message: str) -> dict:
    return {"error": error, "message": message, "statusCode": status_code}
