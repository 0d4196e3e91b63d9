"""
Error taxonomy shared by the history, generation and storage layers.

Every error carries a ``user_message`` suitable for showing to a person.
The API layer maps these classes to HTTP status codes; the CLI prints the
user message.
"""


class ChronicleError(Exception):
    """Base exception for repo-chronicle errors."""

    default_user_message = "Something went wrong. Please try again."

    def __init__(self, message: str, user_message: str | None = None):
        super().__init__(message)
        self.user_message = user_message or self.default_user_message


class ValidationError(ChronicleError):
    """Malformed caller input, raised before any remote or durable call."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"{field}: {reason}", user_message=reason)
        self.field = field
        self.reason = reason


class ActivityShapeError(ChronicleError):
    """A raw remote record does not have the shape of a commit or pull request."""

    def __init__(self, kind: str, field: str, reason: str):
        super().__init__(
            f"Malformed {kind} record ({field}): {reason}",
            user_message="The repository history contained an unreadable record.",
        )
        self.kind = kind
        self.field = field
        self.reason = reason


class RemoteError(ChronicleError):
    """Non-2xx response (or transport failure) from a remote API."""

    def __init__(self, status: int, message: str):
        super().__init__(f"Remote request failed with status {status}: {message}", user_message=message)
        self.status = status
        self.message = message


class ConfigurationError(ChronicleError):
    """Missing or invalid remote credentials."""

    default_user_message = "The text generation service is not configured properly."


class ThrottlingError(ChronicleError):
    """The remote service signalled a quota or rate limit."""

    default_user_message = "Too many requests. Please try again later."


class GenerationFailedError(ChronicleError):
    """Text generation failed for a reason that is not configuration or throttling."""

    default_user_message = "Failed to generate the article."


class StorageError(ChronicleError):
    """The local durable medium could not be read or written."""

    default_user_message = "Could not access local article storage."
