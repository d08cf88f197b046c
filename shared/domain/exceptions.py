"""
Domain exceptions.
"""


class DomainException(Exception):
    """Base exception for domain layer."""

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_name: str, entity_id: str, code: str = "ENTITY_NOT_FOUND"):
        super().__init__(
            message=f"{entity_name} with id '{entity_id}' not found",
            code=code
        )
        self.entity_name = entity_name
        self.entity_id = entity_id


class ValidationError(DomainException):
    """Raised when validation fails."""

    def __init__(self, message: str, field: str = None, code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, code=code)
        self.field = field


class ConflictError(DomainException):
    """Raised when a concurrent write is detected on a versioned aggregate."""

    def __init__(self, entity_name: str, entity_id: str, expected_version: int):
        super().__init__(
            message=(
                f"{entity_name} '{entity_id}' was modified concurrently "
                f"(expected version {expected_version})"
            ),
            code="CONFLICT"
        )
        self.entity_name = entity_name
        self.entity_id = entity_id
        self.expected_version = expected_version


class LockTimeoutError(DomainException):
    """Raised when exclusive access could not be obtained within the wait budget."""

    retryable = True

    def __init__(self, lock_key: str, waited_seconds: float):
        super().__init__(
            message=f"Unable to acquire lock '{lock_key}' within {waited_seconds}s. Please try again.",
            code="LOCK_TIMEOUT"
        )
        self.lock_key = lock_key
        self.waited_seconds = waited_seconds
