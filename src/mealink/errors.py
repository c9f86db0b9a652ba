"""
Mealink - Error types.

Every error raised by the core derives from MealinkError and carries a
message that the presentation layer can show as-is.
"""


class MealinkError(Exception):
    """Base class for core errors."""

    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthRequiredError(MealinkError):
    """No signed-in identity is available for a write or scoped read."""

    default_message = "Sign-in required"


class BackendUnavailableError(MealinkError):
    """A required collaborator (store client, identity provider) is missing."""

    default_message = "Supabase is not available"


class RemoteError(MealinkError):
    """Network or store-side failure."""

    default_message = "Remote store request failed"


class RemoteReadError(RemoteError):
    default_message = "Failed to read from the remote store"


class RemoteWriteError(RemoteError):
    default_message = "Failed to write to the remote store"


class ResolutionError(MealinkError):
    """An inventory line could not be resolved to an ingredient."""

    default_message = "Could not resolve ingredient"

    EMPTY_NAME = "empty_name"

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        super().__init__(message)

    @classmethod
    def empty_name(cls) -> "ResolutionError":
        return cls(cls.EMPTY_NAME, "Ingredient name is empty")
