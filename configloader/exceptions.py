# configloader/exceptions.py
"""
configloader.exceptions
-----------------------

Custom exceptions for configloader.
"""


class ConfigLoadError(Exception):
    """
    Base class for every error raised while loading mock configuration.
    """


class UnknownFieldError(ConfigLoadError, KeyError):
    """
    Raised when a dotted path does not resolve to a field of the target structure.
    """

    def __init__(self, path, reason=None):
        message = f"Unknown configuration field: '{path}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path
        self.reason = reason

    def __str__(self):
        # KeyError would repr() the message otherwise
        return self.args[0]


class TypeMismatchError(ConfigLoadError, TypeError):
    """
    Raised when a value cannot be assigned to the field its path resolves to.
    """

    def __init__(self, path, expected, actual):
        super().__init__(
            f"Cannot assign value of kind '{actual}' to field '{path}' (expected '{expected}')"
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class MockFileError(ConfigLoadError):
    """
    Raised when a mock data file cannot be read or has an unsupported format.
    """

    def __init__(self, file_path, message):
        super().__init__(f"Error loading mock data file {file_path}: {message}")
        self.file_path = file_path
