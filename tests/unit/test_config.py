# pylint: disable=missing-module-docstring,missing-function-docstring

from config import ExtractorConfig, parse_track_names


def test_defaults_keep_all_audio_tracks():
    config = ExtractorConfig.load_from_env({})

    assert config.env == "dev"
    assert config.target_track_names == ()
    assert config.enable_json_logs is True


def test_target_track_names_parsed_from_env():
    config = ExtractorConfig.load_from_env({
        "TARGET_TRACK_NAMES": " AUDIO_TO_CUSTOMER , ,AUDIO_FROM_CUSTOMER",
        "ENABLE_JSON_LOGS": "0",
        "ENV": "prod",
    })

    assert config.target_track_names == ("AUDIO_TO_CUSTOMER", "AUDIO_FROM_CUSTOMER")
    assert config.enable_json_logs is False
    assert config.env == "prod"


def test_blank_track_names_mean_all():
    assert parse_track_names("") == ()
    assert parse_track_names(None) == ()
    assert parse_track_names(" , ") == ()
