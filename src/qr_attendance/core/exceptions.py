class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or the session is in the wrong state."""


class ParseFailure(ValidationError):
    """Raised when no payload format yields both a name and a country."""

    def __init__(self, payload: str, message: str = 'Expected format: "LAST NAME, First Name, Country"'):
        super().__init__(message)
        self.payload = payload


class DuplicatePayload(ValidationError):
    """Raised when a payload was already recorded earlier in the session."""

    def __init__(self, payload: str, message: str = "This attendance has already been recorded in this session."):
        super().__init__(message)
        self.payload = payload


class StorageError(DomainError):
    """Raised when a persistence backend cannot complete an operation."""
