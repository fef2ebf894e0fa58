# pylint: disable=missing-module-docstring,missing-function-docstring

from container.elements import TrackEntry
from demux.track_selector import is_selected, select_track
from spec import TRACK_NAME_FROM_CUSTOMER, TRACK_NAME_TO_CUSTOMER


def audio_entry(name: str, number: int) -> TrackEntry:
    return TrackEntry(track_type=2, track_name=name, track_number=number)


# ---------------------------------------------------------------------
# Audio classification
# ---------------------------------------------------------------------

def test_audio_track_registered_with_empty_allow_list():
    track_map = select_track(audio_entry(TRACK_NAME_FROM_CUSTOMER, 1), frozenset(), {})

    assert track_map == {1: TRACK_NAME_FROM_CUSTOMER}


def test_video_track_ignored():
    entry = TrackEntry(track_type=1, track_name="VIDEO", track_number=1)

    assert select_track(entry, frozenset(), {}) == {}


def test_select_track_mutates_and_returns_same_map():
    track_map: dict[int, str] = {}

    result = select_track(audio_entry("A", 3), frozenset(), track_map)

    assert result is track_map
    assert track_map == {3: "A"}


# ---------------------------------------------------------------------
# Allow-list
# ---------------------------------------------------------------------

def test_allow_list_filters_by_exact_name():
    allow = frozenset({TRACK_NAME_TO_CUSTOMER})
    track_map: dict[int, str] = {}

    select_track(audio_entry(TRACK_NAME_FROM_CUSTOMER, 1), allow, track_map)
    select_track(audio_entry(TRACK_NAME_TO_CUSTOMER, 2), allow, track_map)

    assert track_map == {2: TRACK_NAME_TO_CUSTOMER}


def test_allow_list_is_case_sensitive():
    allow = frozenset({"audio_to_customer"})

    assert is_selected(audio_entry(TRACK_NAME_TO_CUSTOMER, 2), allow) is False


# ---------------------------------------------------------------------
# Malformed entries
# ---------------------------------------------------------------------

def test_missing_fields_register_nothing():
    entries = [
        TrackEntry(track_type=None, track_name="A", track_number=1),
        TrackEntry(track_type=2, track_name=None, track_number=1),
        TrackEntry(track_type=2, track_name="A", track_number=None),
    ]
    track_map: dict[int, str] = {}

    for entry in entries:
        select_track(entry, frozenset(), track_map)

    assert track_map == {}


# ---------------------------------------------------------------------
# Re-declaration (last write wins)
# ---------------------------------------------------------------------

def test_redeclared_track_number_overwrites_name():
    track_map: dict[int, str] = {}

    select_track(audio_entry("FIRST", 1), frozenset(), track_map)
    select_track(audio_entry("SECOND", 1), frozenset(), track_map)

    assert track_map == {1: "SECOND"}
