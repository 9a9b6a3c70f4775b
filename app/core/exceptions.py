from fastapi import HTTPException, status


class FormNotFoundException(HTTPException):
    """Exception raised when no form matches the given identifier."""

    def __init__(self, detail: str = "Form not found"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )


class FormNotAvailableException(HTTPException):
    """Exception raised when an unpublished form is requested by someone other than its owner."""

    def __init__(self, detail: str = "Form is not available"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class PermissionDeniedException(HTTPException):
    """Exception raised when user doesn't have permission."""

    def __init__(self, detail: str = "Permission denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class NotAuthenticatedException(HTTPException):
    """Exception raised when an endpoint needs a session and none was presented."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"}
        )


class InvalidCredentialsException(HTTPException):
    """Exception raised when email/password do not match a user."""

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail
        )


class PersistenceException(HTTPException):
    """Exception raised when the database rejects a read or write."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )


class SettingsStorageException(HTTPException):
    """Exception raised when the app settings file cannot be written."""

    def __init__(self, detail: str = "Failed to save settings"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )
