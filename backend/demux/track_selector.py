"""
Track selection (pure).

Builds the track_number → track_name map from TrackEntry elements.

Rules:
- Only audio tracks (TrackType == 2) are registered.
- An empty allow-list permits every audio track; otherwise the name must
  match an allow-list entry exactly (case-sensitive).
- A TrackEntry missing its type, name or number registers nothing.
- Re-declaring a known track number overwrites it (last write wins).
"""

from __future__ import annotations

from typing import AbstractSet, Dict

from container.elements import TrackEntry
from spec import TRACK_TYPE_AUDIO


TrackMap = Dict[int, str]


def is_complete(entry: TrackEntry) -> bool:
    """True if the entry carries every field selection depends on."""
    return (
        entry.track_type is not None
        and entry.track_name is not None
        and entry.track_number is not None
    )


def is_selected(entry: TrackEntry, allow_list: AbstractSet[str]) -> bool:
    """
    Return True if `entry` should be registered.

    Pure function; never raises.
    """
    if not is_complete(entry):
        return False
    if entry.track_type != TRACK_TYPE_AUDIO:
        return False
    return not allow_list or entry.track_name in allow_list


def select_track(
    entry: TrackEntry,
    allow_list: AbstractSet[str],
    track_map: TrackMap,
) -> TrackMap:
    """
    Register `entry` in `track_map` if it is a selected audio track.

    Mutates and returns `track_map`. Emits nothing downstream.
    """
    if is_selected(entry, allow_list):
        # is_selected() guarantees both are set
        assert entry.track_number is not None and entry.track_name is not None
        track_map[entry.track_number] = entry.track_name
    return track_map
