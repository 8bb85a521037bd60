from fastapi import status


class BookingServiceError(Exception):
    """Request-level failure, rendered as {"message": ...} with status_code."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(BookingServiceError):
    status_code = status.HTTP_409_CONFLICT


class AccountExistsError(ConflictError):
    # Signup reports a taken username as a plain bad request
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(BookingServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthError(BookingServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN


class CapacityError(BookingServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
