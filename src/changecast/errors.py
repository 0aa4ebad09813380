"""Error taxonomy shared across the ingestion, analysis and audio layers."""

from __future__ import annotations


class ChangecastError(RuntimeError):
    """Base class for all errors raised by :mod:`changecast`."""


class FetchError(ChangecastError):
    """Raised when the changelog cannot be fetched after all retries.

    Attributes:
        url: The resource that could not be fetched.
        attempts: Number of attempts made before giving up.
    """

    def __init__(self, message: str, *, url: str = "", attempts: int = 0) -> None:
        super().__init__(message)
        self.url = url
        self.attempts = attempts


class AnalysisError(ChangecastError):
    """Base class for analysis provider failures."""


class AnalysisUnavailable(AnalysisError):
    """Raised when no analysis provider credential is configured."""


class AnalysisProviderError(AnalysisError):
    """Raised when the analysis provider call fails.

    Attributes:
        status_code: HTTP status returned by the provider, if any.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisParseError(AnalysisError):
    """Raised when the provider reply is not the expected JSON document."""


class TtsError(ChangecastError):
    """Base class for speech synthesis failures."""


class TtsUnavailable(TtsError):
    """Raised when no TTS provider credential is configured."""


class TtsProviderError(TtsError):
    """Raised when the TTS provider call fails.

    Attributes:
        status_code: HTTP status returned by the provider, if any.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TtsEmptyResponse(TtsError):
    """Raised when the TTS provider returns no audio payload."""


class CacheIoError(ChangecastError):
    """Raised by cache store clients on transport or protocol failures.

    Cache wrappers log and swallow this error; it never reaches callers of
    the pipeline or orchestrator.
    """


class PlaybackError(ChangecastError):
    """Raised when an audio element cannot decode or play its resource."""


__all__ = [
    "ChangecastError",
    "FetchError",
    "AnalysisError",
    "AnalysisUnavailable",
    "AnalysisProviderError",
    "AnalysisParseError",
    "TtsError",
    "TtsUnavailable",
    "TtsProviderError",
    "TtsEmptyResponse",
    "CacheIoError",
    "PlaybackError",
]
