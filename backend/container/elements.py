"""
Container element primitives.

Pure data containers only.
No parsing, no behavior.

The demux stage sees exactly three element kinds. The kind is decided once,
where decoded tags enter the pipeline (container.tags), so nothing downstream
inspects raw tag ids or children.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TrackEntry:
    """
    Track declaration from the container's Tracks section.

    track_type:
        Matroska TrackType. 2 = audio (spec.TRACK_TYPE_AUDIO).

    track_name:
        Human-readable name, e.g. "AUDIO_FROM_CUSTOMER".

    track_number:
        Number that SimpleBlocks use to reference this track.

    Any field may be None when the source element did not carry it.
    """
    track_type: Optional[int]
    track_name: Optional[str]
    track_number: Optional[int]


@dataclass(frozen=True)
class SimpleBlock:
    """
    One frame of payload data for a single track.

    payload:
        Raw frame bytes. For the audio tracks handled here this is
        PCM16 little-endian.
    """
    track_number: Optional[int]
    payload: Optional[bytes]


@dataclass(frozen=True)
class OtherElement:
    """Any element the demux stage does not act on."""
    tag_id: int


Element = Union[TrackEntry, SimpleBlock, OtherElement]
