"""Exceptions raised by the record picker."""


class RecordPickerError(Exception):
    """Base class for record picker errors."""


class ConfigurationError(RecordPickerError, ValueError):
    """Required binding options are missing or invalid."""


class FetchError(RecordPickerError):
    """A remote fetch for a collection or record failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
