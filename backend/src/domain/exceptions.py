"""
Domain exceptions for the analytics backend.
"""

class AnalyticsException(Exception):
    """Base exception for analytics backend errors."""
    pass

class RefreshInvalidError(AnalyticsException):
    """Raised when a refresh token has no active session (missing, expired, revoked or already rotated)."""
    pass

class ConfigurationError(AnalyticsException):
    """Raised when required configuration is missing or malformed."""
    pass
