"""
Basic exceptions for JSON recovery
"""


class JsonSalvageError(Exception):
    """Base exception for JSON recovery errors"""

    pass


class ConfigurationError(JsonSalvageError):
    """Raised when parser settings or reduction rules are invalid"""

    pass


class UnrecoverableResponseError(JsonSalvageError):
    """Raised when a caller unwraps a failed parse result"""

    def __init__(self, message: str, failure_kind=None):
        super().__init__(message)
        self.failure_kind = failure_kind


class SchemaValidationError(JsonSalvageError):
    """Raised when a recovered object does not match the expected schema"""

    pass
