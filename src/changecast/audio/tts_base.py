"""Base interface for speech synthesis providers."""

from __future__ import annotations


class SpeechProvider:
    """Abstract base class for text-to-speech providers.

    Providers turn text plus a named voice into base64-encoded raw PCM
    (little-endian 16-bit mono at 24 kHz). Subclasses must implement
    :meth:`synthesize`.
    """

    def is_configured(self) -> bool:
        """Return ``True`` when the provider has the credentials it needs."""

        return True

    async def synthesize(self, text: str, voice: str) -> str:
        """Synthesize ``text`` with ``voice``.

        Args:
            text: Text to narrate, passed through literally.
            voice: Prebuilt voice identifier.

        Returns:
            Base64 string of the raw PCM payload; empty when the provider
            returned no audio.

        Raises:
            TtsUnavailable: If the provider is not configured.
            TtsProviderError: If the remote call fails.
            NotImplementedError: If the subclass does not override this method.
        """

        raise NotImplementedError
