"""Error taxonomy shared by the lifecycle, the store and the HTTP surface."""


class DomainError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ValidationError(DomainError):
    """Missing or invalid input, e.g. an empty item description."""

    def __init__(self, message: str):
        super().__init__(message, 400)


class NotFoundError(DomainError):
    """Unknown reservation id or tracking number."""

    def __init__(self, message: str):
        super().__init__(message, 404)


class ConflictError(DomainError):
    """Raise to map to HTTP 409, e.g. a claim on an already-claimed delivery."""

    def __init__(self, message: str):
        super().__init__(message, 409)


class PersistenceError(DomainError):
    """The reservation document could not be read or written."""

    def __init__(self, message: str):
        super().__init__(message, 500)
