"""Tests for the selector value model and its encoding."""

import pytest

from presetcue.exceptions import MalformedSelection
from presetcue.models.selection import (
    MANUAL,
    UNKNOWN,
    Feature,
    PresetSelection,
    TrackingSelection,
    decode_selection,
    encode_selection,
    parse_key_value_pairs,
)


class TestDecode:
    """Test decode_selection."""

    def test_preset(self):
        selection = decode_selection("Type:Preset~CameraId:2~PresetId:3~PresetName:Room")

        assert selection == PresetSelection(camera_id=2, preset_id=3, name="Room")

    def test_preset_missing_camera(self):
        selection = decode_selection("Type:Preset~PresetId:5")

        assert selection.camera_id is None
        assert selection.preset_id == 5

    def test_tracking_feature(self):
        assert decode_selection("Type:Automatic~Feature:Speaker") == TrackingSelection(Feature.SPEAKER)

    def test_manual(self):
        selection = decode_selection("Type:Automatic~Feature:Manual")

        assert selection == MANUAL
        assert selection.is_manual

    @pytest.mark.parametrize(
        "value",
        [
            "PresetId:3~Type:Preset~CameraId:2",
            "Type:Preset~PresetName:Room~CameraId:2~PresetId:3",
            "Type:Preset~CameraId:02~PresetId:3",
            "Type:Preset~CameraId:+2",
            "Type:Preset~CameraId:2~CameraId:2",
            "Type:Preset~CameraId:2~Zoom:4",
            "Type:Automatic~Feature:Speaker~CameraId:2",
            "Type:Automatic~Feature:Speaker~Feature:Speaker",
        ],
    )
    def test_non_canonical_values_rejected(self, value):
        with pytest.raises(MalformedSelection):
            decode_selection(value)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "Type",
            "Type:Preset~",
            "Type:Preset~CameraId",
            "Type:Preset:Extra",
            "~Type:Preset",
            "Type:Error",
            "CameraId:2~PresetId:3",
            "Type:Automatic~Feature:Zoom",
            "Type:Automatic",
            "Type:Preset~CameraId:two",
        ],
    )
    def test_malformed(self, value):
        with pytest.raises(MalformedSelection):
            decode_selection(value)

    def test_non_string(self):
        with pytest.raises(MalformedSelection):
            parse_key_value_pairs(None)


class TestEncode:
    """Test encode_selection."""

    def test_canonical_preset_order(self):
        value = encode_selection(PresetSelection(camera_id=2, preset_id=3, name="Room"))

        assert value == "Type:Preset~CameraId:2~PresetId:3~PresetName:Room"

    def test_tracking(self):
        assert encode_selection(TrackingSelection(Feature.FRAMES)) == "Type:Automatic~Feature:Frames"

    def test_missing_parts_are_omitted(self):
        assert encode_selection(PresetSelection(None, 5)) == "Type:Preset~PresetId:5"

    def test_separators_in_name_are_sanitized(self):
        value = encode_selection(PresetSelection(1, 2, "Stage: Left~Wide"))

        assert value == "Type:Preset~CameraId:1~PresetId:2~PresetName:Stage- Left-Wide"
        assert decode_selection(value).name == "Stage- Left-Wide"

    def test_unknown_has_no_encoding(self):
        with pytest.raises(MalformedSelection):
            encode_selection(UNKNOWN)

    @pytest.mark.parametrize(
        "value",
        [
            "Type:Preset~CameraId:2~PresetId:3~PresetName:Room",
            "Type:Preset~CameraId:1~PresetId:0",
            "Type:Automatic~Feature:Speaker",
            "Type:Automatic~Feature:Manual",
        ],
    )
    def test_canonical_values_survive_decode(self, value):
        assert encode_selection(decode_selection(value)) == value

    @pytest.mark.parametrize(
        "value",
        [
            "Type:Preset",
            "Type:Preset~PresetId:5",
            "Type:Preset~CameraId:3~PresetName:Stage Left",
            "Type:Preset~CameraId:-1~PresetId:0",
            "Type:Automatic~Feature:Frames",
            "Type:Automatic~Feature:Presenter",
            "PresetId:3~Type:Preset~CameraId:2",
            "Type:Preset~CameraId:02~PresetId:3",
            "Type:Automatic~Feature:Speaker~CameraId:2",
        ],
    )
    def test_every_accepted_value_survives_decode(self, value):
        try:
            selection = decode_selection(value)
        except MalformedSelection:
            return

        assert encode_selection(selection) == value
