"""
WAV encoding for extracted speaker tracks.

Channel policy (checked in this order):
1. AUDIO_FROM_CUSTOMER and AUDIO_TO_CUSTOMER → stereo, ch0 = from, ch1 = to
2. AUDIO_FROM_CUSTOMER only                  → mono
3. AUDIO_TO_CUSTOMER only                    → mono
4. neither                                   → NoQualifyingTracks

Other track names are ignored by the encoder.

Output is written with the stdlib wave writer (canonical 44-byte header,
all integers little-endian):

    "RIFF" u32 riff_size "WAVE"
    "fmt " u32 16  u16 format_tag(1)  u16 channels  u32 sample_rate
                   u32 byte_rate  u16 block_align  u16 bits_per_sample
    "data" u32 data_size
    interleaved PCM16 samples (L R L R ... for stereo)

Format is fixed at 8000 Hz / 16-bit. Samples pass through unchanged:
no resampling, no clipping, no normalization.

Stereo with unequal channel lengths: both channels are truncated to the
shorter one.
"""

from __future__ import annotations

import io
import wave
from dataclasses import dataclass
from typing import Mapping, Tuple

import numpy as np

from audio.pcm import int16_to_pcm16le
from extraction.errors import NoQualifyingTracks
from observability.logger import log_event
from observability.metrics import now_ms
from spec import (
    AUDIO_BIT_DEPTH,
    AUDIO_MAX_CHANNELS,
    AUDIO_SAMPLE_RATE_HZ,
    STEREO_CHANNEL_ORDER,
    TRACK_NAME_FROM_CUSTOMER,
    TRACK_NAME_TO_CUSTOMER,
    WaveFormat,
)


# -------------------------
# Document
# -------------------------

@dataclass(frozen=True, eq=False)
class WaveDocument:
    """
    Immutable description of one WAV file.

    channel_data holds one int16 array per channel, all the same length.
    """
    channel_data: Tuple[np.ndarray, ...]
    sample_rate: int = AUDIO_SAMPLE_RATE_HZ
    bit_depth: int = AUDIO_BIT_DEPTH

    def __post_init__(self) -> None:
        if not 1 <= len(self.channel_data) <= AUDIO_MAX_CHANNELS:
            raise ValueError(
                f"channel count {len(self.channel_data)} not in 1..{AUDIO_MAX_CHANNELS}"
            )
        lengths = {len(channel) for channel in self.channel_data}
        if len(lengths) != 1:
            raise ValueError(f"channel lengths differ: {sorted(lengths)}")

    @property
    def channel_count(self) -> int:
        """Number of channels (1 or 2)."""
        return len(self.channel_data)

    @property
    def frame_count(self) -> int:
        """Samples per channel."""
        return len(self.channel_data[0])

    @property
    def format(self) -> WaveFormat:
        """Format bundle used for header fields."""
        return WaveFormat(
            channels=self.channel_count,
            sample_rate_hz=self.sample_rate,
            bit_depth=self.bit_depth,
        )

    def pcm_bytes(self) -> bytes:
        """Interleaved PCM16 little-endian sample data."""
        if self.channel_count == 1:
            interleaved = np.asarray(self.channel_data[0])
        else:
            # shape (frames, channels), row-major → L R L R ...
            interleaved = np.column_stack(self.channel_data).reshape(-1)
        return int16_to_pcm16le(interleaved)

    def to_bytes(self) -> bytes:
        """Serialize the complete WAV file."""
        fmt = self.format
        buffer = io.BytesIO()
        with wave.open(buffer, "wb") as wf:
            wf.setnchannels(fmt.channels)
            wf.setsampwidth(fmt.sample_width_bytes)
            wf.setframerate(fmt.sample_rate_hz)
            wf.writeframes(self.pcm_bytes())
        return buffer.getvalue()


# -------------------------
# Channel policy
# -------------------------

def select_channels(
    samples_by_track: Mapping[str, np.ndarray],
) -> Tuple[str, ...]:
    """
    Return the track names to encode, in channel order.

    Raises:
        NoQualifyingTracks if neither recognized track is present.
    """
    has_from = TRACK_NAME_FROM_CUSTOMER in samples_by_track
    has_to = TRACK_NAME_TO_CUSTOMER in samples_by_track

    if has_from and has_to:
        return STEREO_CHANNEL_ORDER
    if has_from:
        return (TRACK_NAME_FROM_CUSTOMER,)
    if has_to:
        return (TRACK_NAME_TO_CUSTOMER,)

    raise NoQualifyingTracks(
        f"no {TRACK_NAME_FROM_CUSTOMER} or {TRACK_NAME_TO_CUSTOMER} track "
        f"in {sorted(samples_by_track)}"
    )


def build_wave_document(
    samples_by_track: Mapping[str, np.ndarray],
    *,
    extraction_id: str | None = None,
) -> WaveDocument:
    """
    Apply the channel policy and build a WaveDocument.

    Raises:
        NoQualifyingTracks if neither recognized track is present.
    """
    names = select_channels(samples_by_track)
    channels = [np.asarray(samples_by_track[name], dtype=np.int16) for name in names]

    shortest = min(len(channel) for channel in channels)
    if any(len(channel) != shortest for channel in channels):
        log_event({
            "ts_ms": now_ms(),
            "event_type": "WAVE_CHANNEL_LENGTH_MISMATCH",
            "extraction_id": extraction_id,
            "lengths": {name: len(ch) for name, ch in zip(names, channels)},
            "truncated_to": shortest,
        })
        channels = [channel[:shortest] for channel in channels]

    return WaveDocument(channel_data=tuple(channels))


def encode_wave(
    samples_by_track: Mapping[str, np.ndarray],
    *,
    extraction_id: str | None = None,
) -> bytes:
    """
    Encode per-track samples as a complete WAV file.

    Raises:
        NoQualifyingTracks if the mapping is empty or holds neither
        recognized track.
    """
    document = build_wave_document(samples_by_track, extraction_id=extraction_id)
    wav = document.to_bytes()

    log_event({
        "ts_ms": now_ms(),
        "event_type": "WAVE_ENCODED",
        "extraction_id": extraction_id,
        "channels": document.channel_count,
        "frames": document.frame_count,
        "sample_rate_hz": document.sample_rate,
        "bytes": len(wav),
    })

    return wav
