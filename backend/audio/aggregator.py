"""
Per-track sample aggregation.

- Groups TaggedFrame payloads by track name, in arrival order
- Concatenates each track's payloads into one buffer
- Reinterprets the buffer as signed 16-bit little-endian samples

Invariants:
- Arrival order is preserved within a track (no reordering, no dedupe)
- Track-name agnostic: any number of tracks
- An odd total byte length drops the final unpaired byte (logged, never raised)
"""

from __future__ import annotations

from typing import Dict, Iterable, List

import numpy as np

from audio.frames import TaggedFrame
from audio.pcm import pcm16le_to_int16, trailing_byte_count
from observability.logger import log_event
from observability.metrics import now_ms


class SampleAggregator:
    """
    Ordered per-track byte buffers for one extraction.

    Nothing is produced until samples() is called, which the pipeline
    only does after the source reaches end-of-stream.
    """

    def __init__(self, *, extraction_id: str | None = None) -> None:
        self._extraction_id = extraction_id
        # dict preserves first-seen track order
        self._chunks: Dict[str, List[bytes]] = {}
        self._byte_counts: Dict[str, int] = {}

    # -------------------------
    # Core operations
    # -------------------------

    def add(self, frame: TaggedFrame) -> None:
        """Append one frame's payload to its track buffer."""
        self._chunks.setdefault(frame.track_name, []).append(frame.payload)
        self._byte_counts[frame.track_name] = (
            self._byte_counts.get(frame.track_name, 0) + len(frame.payload)
        )

    def extend(self, frames: Iterable[TaggedFrame]) -> None:
        """add() every frame in `frames`."""
        for frame in frames:
            self.add(frame)

    def samples(self) -> Dict[str, np.ndarray]:
        """
        Concatenate and reinterpret every track buffer.

        Returns:
            track_name → int16 sample array, in first-seen track order.
        """
        out: Dict[str, np.ndarray] = {}
        for track_name, chunks in self._chunks.items():
            buffer = b"".join(chunks)

            extra = trailing_byte_count(len(buffer))
            if extra:
                log_event({
                    "ts_ms": now_ms(),
                    "event_type": "PCM_TRAILING_BYTE_TRUNCATED",
                    "extraction_id": self._extraction_id,
                    "track_name": track_name,
                    "byte_count": len(buffer),
                    "truncated_bytes": extra,
                })

            out[track_name] = pcm16le_to_int16(buffer)
        return out

    def clear(self) -> None:
        """Discard all buffered bytes."""
        self._chunks.clear()
        self._byte_counts.clear()

    # -------------------------
    # Introspection helpers
    # -------------------------

    def track_names(self) -> list[str]:
        """Track names seen so far, in first-seen order."""
        return list(self._chunks)

    def byte_count(self, track_name: str) -> int:
        """Total buffered bytes for `track_name` (0 if unseen)."""
        return self._byte_counts.get(track_name, 0)

    def snapshot(self) -> dict[str, int]:
        """Lightweight snapshot for logging: buffered bytes per track."""
        return dict(self._byte_counts)


def aggregate(
    frames: Iterable[TaggedFrame],
    *,
    extraction_id: str | None = None,
) -> Dict[str, np.ndarray]:
    """
    Consume `frames` to completion and return per-track int16 samples.
    """
    aggregator = SampleAggregator(extraction_id=extraction_id)
    aggregator.extend(frames)
    return aggregator.samples()
