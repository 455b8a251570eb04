"""Typed values found in .osu files and the tables that map each key of the
key-value sections to the attribute it fills in

The key-value sections ([General], [Editor], [Metadata], [Difficulty]) are
described by a table of FieldRule. A rule tells which attribute of the
section record the key goes to and how to decode its value. Values of list
fields are split on the rule's separator and each element is decoded on its
own.

Booleans are written as integers in .osu files : 0 is false, any other
integer is true, "true" or "false" are NOT accepted."""

from dataclasses import dataclass
from functools import singledispatch
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from osutools.chart import (
    Colour,
    DifficultySection,
    EditorSection,
    GameMode,
    GeneralSection,
    HitObjectExtras,
    MetadataSection,
    TempoMarker,
)

from .errors import MissingField, OsuSyntaxError

T = TypeVar("T")


def parse_int(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise OsuSyntaxError(f"Unable to parse {raw!r} as an integer") from None


def parse_float(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise OsuSyntaxError(f"Unable to parse {raw!r} as a number") from None


def parse_string(raw: str) -> str:
    return raw


def parse_bool(raw: str) -> bool:
    try:
        return int(raw) != 0
    except ValueError:
        raise OsuSyntaxError(f"Unable to parse {raw!r} as a boolean") from None


def parse_mode(raw: str) -> GameMode:
    try:
        return GameMode(int(raw))
    except ValueError:
        raise OsuSyntaxError(f"Unknown game mode : {raw!r}") from None


class FieldReader:
    """Reads the separated fields of a record one after the other, with the
    whitespace around each of them removed"""

    def __init__(self, line: str, separator: str = ",") -> None:
        self._fields: Iterator[str] = iter(line.split(separator))

    def read(self, decode: Callable[[str], T], name: str) -> T:
        raw = next(self._fields, None)
        if raw is None:
            raise MissingField(f"Missing field : {name}")

        return decode(raw.strip())

    def read_optional(self, decode: Callable[[str], T], default: T) -> T:
        """Missing or undecodable fields are replaced by the default value"""
        try:
            return self.read(decode, "optional field")
        except (MissingField, OsuSyntaxError):
            return default


def parse_colour(raw: str) -> Colour:
    reader = FieldReader(raw)
    r, g, b = (reader.read(parse_int, name) for name in "rgb")
    return Colour(r, g, b)


@dataclass(frozen=True)
class FieldRule:
    attribute: str
    decode: Callable[[str], Any]
    separator: Optional[str] = None

    def decode_value(self, raw: str) -> Any:
        if self.separator is None:
            return self.decode(raw)

        return [self.decode(token.strip()) for token in raw.split(self.separator)]


GENERAL_FIELDS = {
    "AudioFilename": FieldRule("audio_filename", parse_string),
    "AudioLeadIn": FieldRule("audio_lead_in", parse_int),
    "PreviewTime": FieldRule("preview_time", parse_int),
    "Countdown": FieldRule("countdown", parse_bool),
    "SampleSet": FieldRule("sample_set", parse_string),
    "StackLeniency": FieldRule("stack_leniency", parse_float),
    "Mode": FieldRule("mode", parse_mode),
    "LetterboxInBreaks": FieldRule("letterbox_in_breaks", parse_bool),
    "WidescreenStoryboard": FieldRule("widescreen_storyboard", parse_bool),
    "StoryFireInFront": FieldRule("story_fire_in_front", parse_bool),
    "SpecialStyle": FieldRule("special_style", parse_bool),
    "EpilepsyWarning": FieldRule("epilepsy_warning", parse_bool),
    "UseSkinSprites": FieldRule("use_skin_sprites", parse_bool),
}

EDITOR_FIELDS = {
    "Bookmarks": FieldRule("bookmarks", parse_int, ","),
    "DistanceSpacing": FieldRule("distance_spacing", parse_float),
    "BeatDivisor": FieldRule("beat_divisor", parse_int),
    "GridSize": FieldRule("grid_size", parse_int),
    "TimelineZoom": FieldRule("timeline_zoom", parse_float),
}

METADATA_FIELDS = {
    "Title": FieldRule("title", parse_string),
    "TitleUnicode": FieldRule("title_unicode", parse_string),
    "Artist": FieldRule("artist", parse_string),
    "ArtistUnicode": FieldRule("artist_unicode", parse_string),
    "Creator": FieldRule("creator", parse_string),
    "Version": FieldRule("version", parse_string),
    "Source": FieldRule("source", parse_string),
    "Tags": FieldRule("tags", parse_string, " "),
    "BeatmapID": FieldRule("beatmap_id", parse_int),
    "BeatmapSetID": FieldRule("beatmap_set_id", parse_int),
}

DIFFICULTY_FIELDS = {
    "HPDrainRate": FieldRule("hp_drain_rate", parse_float),
    "CircleSize": FieldRule("circle_size", parse_float),
    "OverallDifficulty": FieldRule("overall_difficulty", parse_float),
    "ApproachRate": FieldRule("approach_rate", parse_float),
    "SliderMultiplier": FieldRule("slider_multiplier", parse_float),
    "SliderTickRate": FieldRule("slider_tick_rate", parse_float),
}

KEY_VALUE_SECTIONS: Dict[str, Tuple[Type[Any], Dict[str, FieldRule]]] = {
    "General": (GeneralSection, GENERAL_FIELDS),
    "Editor": (EditorSection, EDITOR_FIELDS),
    "Metadata": (MetadataSection, METADATA_FIELDS),
    "Difficulty": (DifficultySection, DIFFICULTY_FIELDS),
}


def decode_section(
    title: str,
    section_type: Type[T],
    rules: Dict[str, FieldRule],
    pairs: Iterable[Tuple[str, str]],
) -> T:
    """Build a section record out of key-value pairs. Keys with no matching
    rule are ignored, attributes with no matching key keep their default"""
    values: Dict[str, Any] = {}
    for key, raw in pairs:
        rule = rules.get(key)
        if rule is None:
            continue

        try:
            values[rule.attribute] = rule.decode_value(raw)
        except (OsuSyntaxError, MissingField) as e:
            raise OsuSyntaxError(
                f"Could not decode {key} in section [{title}] : {e}"
            ) from e

    return section_type(**values)


def decode_record(
    line: str,
    separator: str,
    record_type: Type[T],
    decoders: Sequence[Tuple[str, Callable[[str], Any]]],
) -> T:
    """Build a record out of a line of positional values. Values beyond the
    ones described by decoders are ignored"""
    reader = FieldReader(line, separator)
    values = {name: reader.read(decode, name) for name, decode in decoders}
    return record_type(**values)


TEMPO_MARKER_FIELDS = [
    ("offset", parse_int),
    ("beat_length", parse_float),
    ("meter", parse_int),
    ("sample_set", parse_string),
    ("sample_index", parse_int),
    ("volume", parse_int),
    ("inherited", parse_bool),
    ("kiai", parse_bool),
]

EXTRAS_FIELDS = [
    ("sample_set", parse_int),
    ("addition_set", parse_int),
    ("custom_index", parse_int),
    ("sample_volume", parse_int),
    ("filename", parse_string),
]


def parse_tempo_marker(line: str) -> TempoMarker:
    return decode_record(line, ",", TempoMarker, TEMPO_MARKER_FIELDS)


def parse_extras(raw: str) -> HitObjectExtras:
    return decode_record(raw, ":", HitObjectExtras, EXTRAS_FIELDS)


@singledispatch
def dump_value(value: Any) -> str:
    return str(value)


@dump_value.register
def dump_bool_value(value: bool) -> str:
    return "1" if value else "0"


@dump_value.register
def dump_mode_value(value: GameMode) -> str:
    return str(value.value)


@dump_value.register
def dump_float_value(value: float) -> str:
    return repr(value)


def dump_section(title: str, section: Any, rules: Dict[str, FieldRule]) -> List[str]:
    """Lines of a key-value section, header included. Empty lists are left
    out since an empty value would read back as the "none" placeholder"""
    lines = [f"[{title}]"]
    for key, rule in rules.items():
        value = getattr(section, rule.attribute)
        if rule.separator is None:
            dumped = dump_value(value)
        elif value:
            dumped = rule.separator.join(dump_value(v) for v in value)
        else:
            continue

        lines.append(f"{key}: {dumped}")

    return lines


def dump_colour(colour: Colour) -> str:
    return ",".join(str(c) for c in colour)


def dump_colours(colours: Iterable[Colour]) -> List[str]:
    lines = ["[Colours]"]
    for index, colour in enumerate(colours, start=1):
        lines.append(f"Combo{index} : {dump_colour(colour)}")

    return lines
