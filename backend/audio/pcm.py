"""PCM conversion utilities."""
import numpy as np

from spec import AUDIO_SAMPLE_DTYPE, AUDIO_SAMPLE_WIDTH_BYTES


def trailing_byte_count(num_bytes: int) -> int:
    """Bytes left over after the last whole 16-bit sample."""
    return num_bytes % AUDIO_SAMPLE_WIDTH_BYTES


def pcm16le_to_int16(pcm_bytes: bytes) -> np.ndarray:
    """
    Reinterpret PCM16 little-endian bytes as signed 16-bit samples.

    Sample count = len(pcm_bytes) // 2. An odd trailing byte is
    truncated: no padding, no error.
    No resampling. No channel mixing. Values pass through unchanged.
    """
    extra = trailing_byte_count(len(pcm_bytes))
    if extra:
        pcm_bytes = pcm_bytes[: len(pcm_bytes) - extra]

    # np.frombuffer is a read-only view; copy so callers own the samples
    return np.frombuffer(pcm_bytes, dtype=AUDIO_SAMPLE_DTYPE).astype(np.int16)


def int16_to_pcm16le(samples: np.ndarray) -> bytes:
    """Serialize int16 samples as PCM16 little-endian bytes."""
    return np.asarray(samples, dtype=np.int16).astype(AUDIO_SAMPLE_DTYPE).tobytes()
