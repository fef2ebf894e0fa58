"""
Decoded-tag → Element conversion.

Input is the output of a streaming EBML decoder that buffers TrackEntry
children (binary tag/length/value decoding happens upstream):

    TrackEntry:
        {"id": 0xAE, "children": [{"id": 0x83, "data": 2},
                                  {"id": 0x536E, "data": "AUDIO_FROM_CUSTOMER"},
                                  {"id": 0xD7, "data": 1}]}

    SimpleBlock:
        {"id": 0xA3, "track": 1, "payload": b"..."}

Anything else becomes OtherElement. Missing or mistyped fields become None
on the element; the demux stage decides what to do with them.

Usage example:

    for element in elements_from_tags(decoder):
        frame = demuxer.process(element)
"""

from __future__ import annotations

from typing import Any, AsyncIterable, AsyncIterator, Iterable, Iterator, Mapping, Optional, Sequence

from container.elements import Element, OtherElement, SimpleBlock, TrackEntry
from spec import (
    EBML_TAG_NAME,
    EBML_TAG_SIMPLE_BLOCK,
    EBML_TAG_TRACK_ENTRY,
    EBML_TAG_TRACK_NUMBER,
    EBML_TAG_TRACK_TYPE,
)


# -------------------------
# Low-level helpers
# -------------------------

def _as_int(value: Any) -> Optional[int]:
    # bool is an int subclass but never a valid tag value
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, str):
        return value
    return None


def _as_bytes(value: Any) -> Optional[bytes]:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return None


def _child_data(children: Sequence[Mapping[str, Any]], tag_id: int) -> Any:
    """Return the data of the first child with `tag_id`, else None."""
    for child in children:
        if child.get("id") == tag_id:
            return child.get("data")
    return None


# -------------------------
# Conversion
# -------------------------

def element_from_tag(tag: Mapping[str, Any]) -> Element:
    """
    Convert one decoded tag mapping into an Element.

    Pure function; never raises for well-formed mappings.
    """
    tag_id = tag.get("id")

    if tag_id == EBML_TAG_TRACK_ENTRY:
        children = tag.get("children") or ()
        return TrackEntry(
            track_type=_as_int(_child_data(children, EBML_TAG_TRACK_TYPE)),
            track_name=_as_str(_child_data(children, EBML_TAG_NAME)),
            track_number=_as_int(_child_data(children, EBML_TAG_TRACK_NUMBER)),
        )

    if tag_id == EBML_TAG_SIMPLE_BLOCK:
        return SimpleBlock(
            track_number=_as_int(tag.get("track")),
            payload=_as_bytes(tag.get("payload")),
        )

    return OtherElement(tag_id=tag_id if isinstance(tag_id, int) else -1)


def elements_from_tags(tags: Iterable[Mapping[str, Any]]) -> Iterator[Element]:
    """Lazily convert a decoded tag stream."""
    for tag in tags:
        yield element_from_tag(tag)


async def elements_from_tags_async(
    tags: AsyncIterable[Mapping[str, Any]],
) -> AsyncIterator[Element]:
    """Lazily convert an async decoded tag stream."""
    async for tag in tags:
        yield element_from_tag(tag)
