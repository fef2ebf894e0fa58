"""
Track-selecting demux stage.

One stateful pass over the element stream:
- TrackEntry   → may register a track (never forwarded)
- SimpleBlock  → TaggedFrame if its track is registered, else dropped
- OtherElement → dropped

Ordering:
- Elements are processed strictly in arrival order, with no lookahead.
- A block for a track number not yet registered is dropped, even if a
  later TrackEntry would have registered it.

Drops are never raised. They are counted in DropCounters for observability.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from audio.frames import TaggedFrame
from container.elements import Element, SimpleBlock, TrackEntry
from demux.track_selector import TrackMap, is_complete, is_selected, select_track
from observability.logger import log_event
from observability.metrics import now_ms


def filter_frame(block: SimpleBlock, track_map: TrackMap) -> Optional[TaggedFrame]:
    """
    Tag `block` with its registered track name.

    Returns None if the block is malformed or its track is not registered.
    The payload is forwarded unchanged.
    """
    if block.track_number is None or block.payload is None:
        return None

    track_name = track_map.get(block.track_number)
    if track_name is None:
        return None

    return TaggedFrame(track_name=track_name, payload=block.payload)


@dataclass
class DropCounters:
    """
    Drop counters for observability.

    malformed:      TrackEntry/SimpleBlock missing a required field
    unregistered:   SimpleBlock for a track number with no descriptor
    ignored_tracks: complete TrackEntry that was not selected
                    (not audio, or not in the allow-list)
    other:          any other element kind
    """
    malformed: int = 0
    unregistered: int = 0
    ignored_tracks: int = 0
    other: int = 0

    def total(self) -> int:
        """Total elements dropped for any reason."""
        return self.malformed + self.unregistered + self.ignored_tracks + self.other

    def snapshot(self) -> dict[str, int]:
        """Lightweight snapshot for logging."""
        return {
            "malformed": self.malformed,
            "unregistered": self.unregistered,
            "ignored_tracks": self.ignored_tracks,
            "other": self.other,
            "total": self.total(),
        }


class AudioTrackDemuxer:
    """
    Stateful demux stage for a single extraction.

    Owns the track map; nothing is shared between instances, so
    independent extractions may run concurrently.
    """

    def __init__(
        self,
        *,
        target_track_names: Iterable[str] = (),
        extraction_id: str | None = None,
    ) -> None:
        self._allow_list: frozenset[str] = frozenset(target_track_names)
        self._extraction_id = extraction_id
        self._track_map: TrackMap = {}
        self.drops: DropCounters = DropCounters()
        self.frames_out: int = 0

    # -------------------------
    # Core operation
    # -------------------------

    def process(self, element: Element) -> Optional[TaggedFrame]:
        """
        Process one element and return the TaggedFrame it yields, if any.
        """
        if isinstance(element, TrackEntry):
            self._on_track_entry(element)
            return None

        if isinstance(element, SimpleBlock):
            return self._on_simple_block(element)

        # OtherElement and anything outside the closed variant
        self.drops.other += 1
        return None

    def iter_frames(self, elements: Iterable[Element]) -> Iterator[TaggedFrame]:
        """Run process() over `elements`, yielding only tagged frames."""
        for element in elements:
            frame = self.process(element)
            if frame is not None:
                yield frame

    # -------------------------
    # Introspection helpers
    # -------------------------

    @property
    def track_map(self) -> dict[int, str]:
        """Copy of the current track_number → track_name map."""
        return dict(self._track_map)

    def snapshot(self) -> dict[str, object]:
        """Lightweight snapshot for logging."""
        return {
            "tracks": {str(k): v for k, v in self._track_map.items()},
            "frames_out": self.frames_out,
            "dropped": self.drops.snapshot(),
        }

    # -------------------------
    # Internal
    # -------------------------

    def _on_track_entry(self, entry: TrackEntry) -> None:
        if not is_complete(entry):
            self.drops.malformed += 1
            return

        if not is_selected(entry, self._allow_list):
            self.drops.ignored_tracks += 1
            return

        previous = self._track_map.get(entry.track_number)  # type: ignore[arg-type]
        select_track(entry, self._allow_list, self._track_map)

        if previous is None:
            event_type = "TRACK_REGISTERED"
        elif previous != entry.track_name:
            event_type = "TRACK_REDECLARED"
        else:
            return

        log_event({
            "ts_ms": now_ms(),
            "event_type": event_type,
            "extraction_id": self._extraction_id,
            "track_number": entry.track_number,
            "track_name": entry.track_name,
            "previous_track_name": previous,
        })

    def _on_simple_block(self, block: SimpleBlock) -> Optional[TaggedFrame]:
        if block.track_number is None or block.payload is None:
            self.drops.malformed += 1
            return None

        frame = filter_frame(block, self._track_map)
        if frame is None:
            self.drops.unregistered += 1
            return None

        self.frames_out += 1
        return frame
