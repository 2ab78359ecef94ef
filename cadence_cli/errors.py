class CadenceError(Exception):
    """Base class for every error raised by cadence."""


class ConfigError(CadenceError):
    """Raised when configuration cannot be read, parsed or validated."""


class InvalidTimeDeltaError(CadenceError, ValueError):
    """Raised when a velocity is requested over a non-positive duration."""


class GitRepositoryError(CadenceError):
    """Raised when the repository cannot be opened or read."""


class FetchError(CadenceError):
    """Raised when a web page cannot be fetched or parsed."""


class WebhookError(CadenceError):
    """Raised when the webhook server or its job queue fails."""


class AIAnalysisError(CadenceError):
    """Raised when an AI provider cannot be reached or answers garbage."""
