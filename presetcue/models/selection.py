"""
Selector value model and its Key:Value~ encoding

Values are ordered ``Key:Value`` pairs joined by ``~``, e.g.::

    Type:Preset~CameraId:2~PresetId:3~PresetName:Room
    Type:Automatic~Feature:Speaker
"""

import re
from dataclasses import dataclass
from enum import Enum

from presetcue.exceptions import MalformedSelection

PAIR_SEPARATOR = "~"
KEY_VALUE_SEPARATOR = ":"

# One or more Key:Value pairs, neither side may contain a separator
_PAIRS_PATTERN = re.compile(r"^[^~:]+:[^~:]+(?:~[^~:]+:[^~:]+)*$")

# Preset keys after Type, in encoding order; each is optional
PRESET_KEYS = ("CameraId", "PresetId", "PresetName")


class Feature(Enum):
    """Automatic framing modes offered by the selector"""

    PRESENTER = "Presenter"
    SPEAKER = "Speaker"
    FRAMES = "Frames"
    MANUAL = "Manual"


TRACKING_FEATURES = (Feature.PRESENTER, Feature.SPEAKER, Feature.FRAMES)


@dataclass(frozen=True)
class PresetSelection:
    """A stored camera position. Ids may be missing on references built from partial payloads."""

    camera_id: int | None
    preset_id: int | None
    name: str = ""


@dataclass(frozen=True)
class TrackingSelection:
    """An automatic framing mode, or Manual"""

    feature: Feature

    @property
    def is_manual(self) -> bool:
        return self.feature is Feature.MANUAL


@dataclass(frozen=True)
class UnknownSelection:
    """Nothing known about what the selector should show"""


UNKNOWN = UnknownSelection()
MANUAL = TrackingSelection(Feature.MANUAL)

Selection = PresetSelection | TrackingSelection | UnknownSelection


def parse_key_value_pairs(data: str) -> list[tuple[str, str]]:
    """
    Parse ``Key:Value~Key:Value`` into ordered pairs.

    Raises:
        MalformedSelection: data is not a well-formed pair list
    """
    if not isinstance(data, str) or not _PAIRS_PATTERN.match(data):
        raise MalformedSelection(f"Unable to parse data key value pair [{data}] || Malformed String")

    return [tuple(element.split(KEY_VALUE_SEPARATOR)) for element in data.split(PAIR_SEPARATOR)]


def _optional_int(fields: dict[str, str], key: str) -> int | None:
    if key not in fields:
        return None
    raw = fields[key]
    try:
        number = int(raw)
    except ValueError:
        raise MalformedSelection(f"{key} must be an integer, got [{raw}]") from None
    # Leading zeros, signs and padding would not survive re-encoding
    if str(number) != raw:
        raise MalformedSelection(f"{key} is not in canonical form: [{raw}]")
    return number


def decode_selection(value: str) -> PresetSelection | TrackingSelection:
    """
    Decode a selector value.

    Only the canonical form produced by ``encode_selection`` is accepted, so
    every decoded value encodes back to the same string.

    Raises:
        MalformedSelection: unparseable value, keys out of order, unknown or
            repeated keys, non-canonical integers, unknown Type or Feature
    """
    pairs = parse_key_value_pairs(value)
    (first_key, kind), rest = pairs[0], pairs[1:]
    if first_key != "Type":
        raise MalformedSelection(f"Selection [{value}] must start with Type")
    keys = [key for key, _ in rest]
    fields = dict(rest)

    if kind == "Preset":
        if keys != [key for key in PRESET_KEYS if key in fields]:
            raise MalformedSelection(f"Unexpected or out of order keys in [{value}]")
        return PresetSelection(
            camera_id=_optional_int(fields, "CameraId"),
            preset_id=_optional_int(fields, "PresetId"),
            name=fields.get("PresetName", ""),
        )

    if kind == "Automatic":
        if keys != ["Feature"]:
            raise MalformedSelection(f"Unexpected keys in [{value}]")
        try:
            return TrackingSelection(Feature(fields["Feature"]))
        except ValueError:
            raise MalformedSelection(f"Unknown tracking feature in [{value}]") from None

    raise MalformedSelection(f"Unknown selection type [{kind}] in [{value}]")


def sanitize_name(name: str) -> str:
    """Replace separator characters so a preset name can be carried in a value"""
    return name.replace(PAIR_SEPARATOR, "-").replace(KEY_VALUE_SEPARATOR, "-")


def encode_selection(selection: Selection) -> str:
    """
    Encode a selection in canonical key order.

    Raises:
        MalformedSelection: the selection has no encoding (UNKNOWN)
    """
    if isinstance(selection, PresetSelection):
        pairs = [("Type", "Preset")]
        if selection.camera_id is not None:
            pairs.append(("CameraId", str(selection.camera_id)))
        if selection.preset_id is not None:
            pairs.append(("PresetId", str(selection.preset_id)))
        name = sanitize_name(selection.name)
        if name:
            pairs.append(("PresetName", name))
    elif isinstance(selection, TrackingSelection):
        pairs = [("Type", "Automatic"), ("Feature", selection.feature.value)]
    else:
        raise MalformedSelection(f"{selection!r} has no selector encoding")

    return PAIR_SEPARATOR.join(f"{key}{KEY_VALUE_SEPARATOR}{value}" for key, value in pairs)
