"""Error taxonomy for the processing pipeline."""

from typing import Optional


class PipelineError(Exception):
    """Base class for every error the pipeline surfaces to its caller."""


class DecodeError(PipelineError):
    """Input bytes could not be parsed as any supported audio container."""


class UnsupportedFormatError(PipelineError):
    """Audio decoded but channel count or sample rate could not be determined."""


class NotFoundError(PipelineError):
    """A source resolver could not find the requested recording or stream."""


class UnavailableSourceError(PipelineError):
    """No retrievable audio stream exists for a remote submission."""


class ProviderError(PipelineError):
    """An external provider call failed or returned nothing usable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TranscriptionProviderError(ProviderError):
    pass


class SummaryProviderError(ProviderError):
    pass


class ConfigurationError(PipelineError):
    """A required credential or setting is missing."""
