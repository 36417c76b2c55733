"""Custom exceptions for the application."""

class ApplicationError(Exception):
    """Base application error."""
    pass

class DetectionError(ApplicationError):
    """Detection service responses that cannot be used."""
    pass

class ConfigError(ApplicationError):
    """Configuration-related errors."""
    pass

class ModelError(ApplicationError):
    """Model loading/inference errors."""
    pass

class ValidationError(ApplicationError):
    """Input data validation errors."""
    pass
