"""Exceptions raised while loading and validating config documents."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a config document is missing or is not valid JSON."""


class DataValidationError(DataError):
    """Raised when a config document parses but fails structural or coverage checks."""


class DataReferenceError(DataError):
    """Raised when a document references an id that no other document defines."""
