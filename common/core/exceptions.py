class AppException(Exception):
    """Base application exception."""

    pass


class NotFoundError(AppException):
    """Resource not found exception."""

    pass


class ValidationError(AppException):
    """Validation error exception."""

    pass


class StorageError(AppException):
    """Storage operation error exception."""

    pass


class SignatureVerificationError(AppException):
    """Wallet signature could not be verified."""

    pass
