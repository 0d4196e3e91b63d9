"""Classification of text generation failures.

Upstream SDKs do not agree on structured error codes, so classification
prefers an HTTP status when the exception carries one and otherwise falls
back to matching phrases in the error message. The phrase match is fragile
and only as good as the upstream wording.
"""

from src.errors import (
    ChronicleError,
    ConfigurationError,
    GenerationFailedError,
    ThrottlingError,
)

CONFIGURATION_PHRASES = ("api key", "api_key", "apikey")
THROTTLING_PHRASES = ("quota", "rate limit", "rate_limit", "ratelimit")

CONFIGURATION_STATUSES = frozenset({401, 403})
THROTTLING_STATUSES = frozenset({429})


def _status_of(error: BaseException) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def classify_generation_error(error: BaseException) -> ChronicleError:
    """Map an upstream exception onto the error taxonomy.

    Args:
        error: Exception raised by the text generation call.

    Returns:
        ConfigurationError, ThrottlingError or GenerationFailedError, with
        the original message kept for logs.
    """
    if isinstance(error, (ConfigurationError, ThrottlingError, GenerationFailedError)):
        return error

    message = str(error) or type(error).__name__

    status = _status_of(error)
    if status in CONFIGURATION_STATUSES:
        return ConfigurationError(message)
    if status in THROTTLING_STATUSES:
        return ThrottlingError(message)

    lowered = message.lower()
    if any(phrase in lowered for phrase in CONFIGURATION_PHRASES):
        return ConfigurationError(message)
    if any(phrase in lowered for phrase in THROTTLING_PHRASES):
        return ThrottlingError(message)

    return GenerationFailedError(message)
