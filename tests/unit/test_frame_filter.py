# pylint: disable=missing-module-docstring,missing-function-docstring

from typing import Any

import pytest

import demux.frame_filter as frame_filter_mod
from audio.frames import TaggedFrame
from container.elements import OtherElement, SimpleBlock, TrackEntry
from demux.frame_filter import AudioTrackDemuxer, filter_frame
from spec import TRACK_NAME_FROM_CUSTOMER, TRACK_NAME_TO_CUSTOMER


def audio_entry(name: str, number: int) -> TrackEntry:
    return TrackEntry(track_type=2, track_name=name, track_number=number)


def block(number: int, payload: bytes) -> SimpleBlock:
    return SimpleBlock(track_number=number, payload=payload)


# ---------------------------------------------------------------------
# filter_frame (pure)
# ---------------------------------------------------------------------

def test_filter_frame_tags_registered_block():
    frame = filter_frame(block(1, b"\x01\x00"), {1: TRACK_NAME_FROM_CUSTOMER})

    assert frame == TaggedFrame(track_name=TRACK_NAME_FROM_CUSTOMER, payload=b"\x01\x00")


def test_filter_frame_drops_unregistered_block():
    assert filter_frame(block(2, b"\x01\x00"), {1: TRACK_NAME_FROM_CUSTOMER}) is None


def test_filter_frame_drops_block_without_payload():
    assert filter_frame(SimpleBlock(track_number=1, payload=None), {1: "A"}) is None


# ---------------------------------------------------------------------
# Demuxer: ordering and dropping
# ---------------------------------------------------------------------

def test_demuxer_forwards_only_registered_blocks():
    demuxer = AudioTrackDemuxer()

    out = [
        demuxer.process(audio_entry(TRACK_NAME_FROM_CUSTOMER, 1)),
        demuxer.process(block(1, b"\x01\x00")),
        demuxer.process(block(7, b"\x09\x00")),
        demuxer.process(OtherElement(tag_id=0x1F43B675)),
    ]

    assert out == [
        None,
        TaggedFrame(track_name=TRACK_NAME_FROM_CUSTOMER, payload=b"\x01\x00"),
        None,
        None,
    ]
    assert demuxer.frames_out == 1
    assert demuxer.drops.unregistered == 1
    assert demuxer.drops.other == 1


def test_block_before_track_entry_is_dropped():
    demuxer = AudioTrackDemuxer()

    early = demuxer.process(block(1, b"\x01\x00"))
    demuxer.process(audio_entry(TRACK_NAME_FROM_CUSTOMER, 1))
    late = demuxer.process(block(1, b"\x02\x00"))

    assert early is None
    assert late is not None and late.payload == b"\x02\x00"


def test_iter_frames_preserves_arrival_order():
    demuxer = AudioTrackDemuxer()
    elements = [
        audio_entry(TRACK_NAME_FROM_CUSTOMER, 1),
        audio_entry(TRACK_NAME_TO_CUSTOMER, 2),
        block(2, b"\x0a\x00"),
        block(1, b"\x01\x00"),
        block(2, b"\x0b\x00"),
    ]

    frames = list(demuxer.iter_frames(elements))

    assert [(f.track_name, f.payload) for f in frames] == [
        (TRACK_NAME_TO_CUSTOMER, b"\x0a\x00"),
        (TRACK_NAME_FROM_CUSTOMER, b"\x01\x00"),
        (TRACK_NAME_TO_CUSTOMER, b"\x0b\x00"),
    ]


def test_allow_list_excludes_other_speaker():
    demuxer = AudioTrackDemuxer(target_track_names=[TRACK_NAME_TO_CUSTOMER])
    elements = [
        audio_entry(TRACK_NAME_FROM_CUSTOMER, 1),
        audio_entry(TRACK_NAME_TO_CUSTOMER, 2),
        block(1, b"\x01\x00"),
        block(2, b"\x02\x00"),
    ]

    frames = list(demuxer.iter_frames(elements))

    assert [f.track_name for f in frames] == [TRACK_NAME_TO_CUSTOMER]
    assert demuxer.track_map == {2: TRACK_NAME_TO_CUSTOMER}
    assert demuxer.drops.ignored_tracks == 1


def test_malformed_elements_counted_not_raised():
    demuxer = AudioTrackDemuxer()

    demuxer.process(TrackEntry(track_type=2, track_name=None, track_number=1))
    demuxer.process(SimpleBlock(track_number=None, payload=b"\x00\x00"))

    assert demuxer.track_map == {}
    assert demuxer.drops.malformed == 2
    assert demuxer.drops.total() == 2


# ---------------------------------------------------------------------
# Re-declaration
# ---------------------------------------------------------------------

def test_redeclared_track_routes_later_blocks_to_new_name(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    emitted: list[dict[str, Any]] = []
    monkeypatch.setattr(frame_filter_mod, "log_event", emitted.append)

    demuxer = AudioTrackDemuxer(extraction_id="ext_test")
    frames = list(demuxer.iter_frames([
        audio_entry("FIRST", 1),
        block(1, b"\x01\x00"),
        audio_entry("SECOND", 1),
        block(1, b"\x02\x00"),
    ]))

    assert [f.track_name for f in frames] == ["FIRST", "SECOND"]
    assert [e["event_type"] for e in emitted] == ["TRACK_REGISTERED", "TRACK_REDECLARED"]
    assert emitted[1]["previous_track_name"] == "FIRST"
    assert emitted[1]["extraction_id"] == "ext_test"


def test_unselected_redeclaration_keeps_earlier_registration():
    demuxer = AudioTrackDemuxer(target_track_names=[TRACK_NAME_FROM_CUSTOMER])

    demuxer.process(audio_entry(TRACK_NAME_FROM_CUSTOMER, 1))
    demuxer.process(audio_entry(TRACK_NAME_TO_CUSTOMER, 1))

    assert demuxer.track_map == {1: TRACK_NAME_FROM_CUSTOMER}


def test_demuxers_do_not_share_state():
    a = AudioTrackDemuxer()
    b = AudioTrackDemuxer()

    a.process(audio_entry(TRACK_NAME_FROM_CUSTOMER, 1))

    assert b.track_map == {}
    assert b.process(block(1, b"\x01\x00")) is None


def test_drop_snapshot_counts_each_reason():
    demuxer = AudioTrackDemuxer(target_track_names=[TRACK_NAME_TO_CUSTOMER])

    demuxer.process(TrackEntry(track_type=1, track_name="VIDEO", track_number=3))
    demuxer.process(audio_entry(TRACK_NAME_FROM_CUSTOMER, 1))
    demuxer.process(SimpleBlock(track_number=1, payload=None))
    demuxer.process(block(1, b"\x01\x00"))
    demuxer.process(OtherElement(tag_id=0xE7))

    assert demuxer.drops.snapshot() == {
        "malformed": 1,
        "unregistered": 1,
        "ignored_tracks": 2,
        "other": 1,
        "total": 5,
    }
