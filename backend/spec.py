"""
SPEC-AS-CONSTANTS
-----------------
Single source of truth for all behavioral invariants in the extractor.

Rules:
- If changing a value changes runtime behavior, it belongs here.
- No magic numbers elsewhere in the codebase.
- Other modules MUST import from this file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Tuple

# =============================================================================
# Container Tag IDs (Matroska / EBML)
# =============================================================================
# Only the tags the demux stage looks at. Everything else is OtherElement.

EBML_TAG_TRACK_ENTRY: Final[int] = 0xAE
EBML_TAG_TRACK_NUMBER: Final[int] = 0xD7
EBML_TAG_TRACK_TYPE: Final[int] = 0x83
EBML_TAG_NAME: Final[int] = 0x536E
EBML_TAG_SIMPLE_BLOCK: Final[int] = 0xA3

# Matroska TrackType: 1 = video, 2 = audio, 17 = subtitle
TRACK_TYPE_AUDIO: Final[int] = 2

# =============================================================================
# Track Names
# =============================================================================
# Producer-side names of the two speaker tracks in a contact-center stream.

TRACK_NAME_FROM_CUSTOMER: Final[str] = "AUDIO_FROM_CUSTOMER"
TRACK_NAME_TO_CUSTOMER: Final[str] = "AUDIO_TO_CUSTOMER"

# Channel order for stereo output: ch0 = from-customer, ch1 = to-customer
STEREO_CHANNEL_ORDER: Final[Tuple[str, ...]] = (
    TRACK_NAME_FROM_CUSTOMER,
    TRACK_NAME_TO_CUSTOMER,
)

# =============================================================================
# Audio Format (PCM16 @ 8kHz, 1 or 2 channels)
# =============================================================================

AUDIO_SAMPLE_RATE_HZ: Final[int] = 8_000
AUDIO_BIT_DEPTH: Final[int] = 16
AUDIO_SAMPLE_WIDTH_BYTES: Final[int] = AUDIO_BIT_DEPTH // 8
AUDIO_SAMPLE_DTYPE: Final[str] = "<i2"  # signed 16-bit little-endian

AUDIO_MAX_CHANNELS: Final[int] = 2

# =============================================================================
# WAV Container Layout (canonical 44-byte header)
# =============================================================================

WAVE_HEADER_BYTES: Final[int] = 44

# =============================================================================
# Convenience Bundles
# =============================================================================

@dataclass(frozen=True)
class WaveFormat:
    """
    Immutable bundle describing the output PCM format.

    This is a convenience wrapper for passing format metadata around;
    it is NOT a second source of truth.
    """
    channels: int
    sample_rate_hz: int = AUDIO_SAMPLE_RATE_HZ
    bit_depth: int = AUDIO_BIT_DEPTH

    @property
    def sample_width_bytes(self) -> int:
        """Return bytes per sample (one channel)."""
        return self.bit_depth // 8
