"""
Extraction errors.

Only failures the caller must act on are raised. Recoverable element-level
problems (malformed elements, frames for unregistered tracks, an odd trailing
PCM byte) are handled where they occur and only show up in logs.
"""


class ExtractionError(Exception):
    """Base class for extraction errors."""


class NoQualifyingTracks(ExtractionError):
    """
    Raised when none of the recognized speaker tracks
    (AUDIO_FROM_CUSTOMER / AUDIO_TO_CUSTOMER) have samples to encode.

    Indicates a configuration or input problem: an allow-list that excludes
    both tracks, a stream without those tracks, or an empty stream. No
    waveform is produced.
    """


class SourceStreamFailure(ExtractionError):
    """
    Raised when the element source terminates abnormally.

    The transport or decoder error is chained as __cause__. The whole
    extraction has failed; partial per-track buffers are discarded.
    """
