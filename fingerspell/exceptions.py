"""
Custom exceptions for the fingerspelling classifier.
"""


class FingerspellError(Exception):
    """Base exception for classifier errors."""
    pass


class InvalidInputError(FingerspellError):
    """Raised when a single frame cannot be classified (bad lift vector, missing geometry)."""
    pass


class ConfigurationError(FingerspellError):
    """Raised when thresholds or the resolver dispatch table are unusable."""
    pass
