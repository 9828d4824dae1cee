class TimedShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:timedshortener_error'


class InvalidPayloadError(TimedShortenerError):
    """Raised when a create request carries no payload."""

    error_code = 'INVALID_PAYLOAD'


class ReservedCodeError(InvalidPayloadError):
    """Raised when a custom code falls inside a keyspace the application uses for its own records."""

    error_code = 'RESERVED_CODE'


class UnauthorizedError(TimedShortenerError):
    """Raised when the admin shared secret is missing or wrong."""

    error_code = 'UNAUTHORIZED'


class RateLimitedError(TimedShortenerError):
    """Raised when an identity exhausted its requests for the current window."""

    error_code = 'RATE_LIMITED'

    def __init__(self, retry_after: int, message: str = 'Rate limit exceeded. Try again later.'):
        super().__init__(message)
        self.retry_after = retry_after


class CodeSpaceExhaustedError(TimedShortenerError):
    """Raised when no free short code was found within the allowed attempts."""

    error_code = 'CODE_SPACE_EXHAUSTED'


class ConfigurationError(TimedShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
