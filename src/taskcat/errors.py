"""Custom exception hierarchy for taskcat."""


class AppError(Exception):
    """Base exception for app-specific failures."""


class UsageError(ValueError, AppError):
    """Command usage or user-input errors."""


class ValidationError(ValueError, AppError):
    """Domain validation errors. The store is left unchanged."""


class FieldTooLongError(ValidationError):
    """A name, due date, or category name exceeds the byte limit."""


class CategoryFullError(ValidationError):
    """A category already holds the maximum number of tasks."""


class TooManyCategoriesError(ValidationError):
    """The store already holds the maximum number of categories."""


class InvalidStatusError(ValidationError):
    """A status value is not one of the recognized labels."""


class InvalidFieldError(ValidationError):
    """A field key is not editable."""


class IndexOutOfRangeError(ValidationError):
    """A category or task index does not exist."""


class DuplicateIndexError(ValidationError):
    """A bulk selection repeats an index."""

    def __init__(self, message: str, index: int):
        super().__init__(message)
        self.index = index


class ConfigError(ValueError, AppError):
    """Profile/configuration validation errors."""


class StorageError(AppError):
    """Storage load/save failures."""


class CorruptFormatError(StorageError):
    """The data file is truncated or malformed."""
