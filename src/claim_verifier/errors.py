"""Error taxonomy for the verification pipeline.

Only RetrievalError (initial search), SynthesisError, MappingError,
TranscriptionError and ConfigurationError reach the HTTP layer.
LocalizationError is always absorbed by the localizer.
"""

from typing import Optional


class ClaimVerifierError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(ClaimVerifierError):
    """A required credential or endpoint is missing."""


class RetrievalError(ClaimVerifierError):
    """Encyclopedia search or content fetch failed or returned malformed data."""


class SynthesisError(ClaimVerifierError):
    """The verdict tool call failed, was missing, or did not validate."""


class LocalizationError(ClaimVerifierError):
    """Translation of the explanation failed."""


class MappingError(ClaimVerifierError):
    """A cited evidence index does not exist."""


class TranscriptionError(ClaimVerifierError):
    """The speech-to-text upstream failed."""


class LLMCallError(ClaimVerifierError):
    """A chat-completion request did not succeed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
