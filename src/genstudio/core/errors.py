"""Error taxonomy shared by the relay and the UI.

Every error carries the HTTP status code the relay answers with and a
message that is safe to show to the user as-is.

Hierarchy
---------
- :class:`GenStudioError`
    - :class:`ConfigurationError` (500)
        - :class:`MissingCredential`
    - :class:`ValidationError` (400)
        - :class:`MalformedRequestBody`
        - :class:`InvalidModelPath`
        - :class:`InvalidInput`
        - :class:`EmptyPrompt`
        - :class:`PromptTooLong`
    - :class:`ProviderError` (500)
        - :class:`ProviderLookupError` (provider's own status code)
"""

from __future__ import annotations


class GenStudioError(Exception):
    """Base class for all user-facing GenStudio errors."""

    status_code: int = 500
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(GenStudioError):
    """The process is missing configuration the relay needs."""

    status_code = 500


class MissingCredential(ConfigurationError):
    default_message = "Missing REPLICATE_API_TOKEN in environment."


class ValidationError(GenStudioError):
    """User input failed validation.

    The message is intended to be displayed directly to the user.
    """

    status_code = 400
    default_message = "Invalid request."


class MalformedRequestBody(ValidationError):
    default_message = "Invalid JSON format."


class InvalidModelPath(ValidationError):
    default_message = 'Invalid model format. Use "owner/model" or "owner/model:version".'


class InvalidInput(ValidationError):
    default_message = "Invalid input format."


class EmptyPrompt(ValidationError):
    default_message = "Prompt cannot be empty"


class PromptTooLong(ValidationError):
    default_message = "Prompt cannot exceed 500 characters"


class ProviderError(GenStudioError):
    """The inference provider call failed."""

    status_code = 500


class ProviderLookupError(ProviderError):
    """The provider's model-metadata endpoint answered with a non-2xx status.

    The provider's status code and raw body are passed through unchanged.
    """

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(body)
        self.status_code = status_code
        self.body = body
