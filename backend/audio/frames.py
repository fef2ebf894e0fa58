"""
Audio frame primitives.

Pure data containers only.
No behavior, no buffering, no timing logic.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class TaggedFrame:
    """
    One SimpleBlock payload that passed track selection.

    track_name:
        Name of the registered audio track the block belongs to.

    payload:
        Raw PCM16 little-endian bytes, forwarded unchanged from the block.
        Length is NOT guaranteed to be even; the aggregator handles that.
    """
    track_name: str
    payload: bytes
