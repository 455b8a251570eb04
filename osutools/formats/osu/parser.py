"""Section-level parsing of .osu files

A .osu file starts with a version line then is made of sections :

    osu file format v14

    [General]
    AudioFilename: audio.mp3
    ...

    [TimingPoints]
    0,500,4,2,0,100,1,0
    ...

[General], [Editor], [Metadata] and [Difficulty] hold key-value pairs,
[Colours] holds key-value pairs with a stricter set of allowed keys,
[TimingPoints] and [HitObjects] hold comma-separated positional records and
[Events] (storyboard, backgrounds, breaks) is skipped entirely"""

import re
from dataclasses import replace
from typing import Callable, Iterator, List, Optional, Tuple, TypeVar

from osutools.chart import (
    Colour,
    ColoursSection,
    Difficulty,
    HitObject,
    TempoMarker,
)

from .errors import MissingField, OsuSyntaxError
from .fields import (
    KEY_VALUE_SECTIONS,
    decode_section,
    parse_colour,
    parse_int,
    parse_tempo_marker,
)
from .hit_objects import parse_hit_object
from .lines import LineScanner

T = TypeVar("T")

VERSION_PREFIX = "osu file format v"


class OsuParser:
    """Parses .osu documents into Difficulty objects. The same parser can be
    reused for every file of a bundle"""

    def __init__(self) -> None:
        self.version_line = re.compile(r"osu file format v(\d+)")
        self.header_line = re.compile(r"\[([^\[\]]*)\]\s*")
        self.key_value_line = re.compile(r"(\S+)\s*:(\s*(\S.*))?")
        self.combo_key = re.compile(r"Combo\d+")

    def parse(self, text: str) -> Difficulty:
        lines = LineScanner(text)
        difficulty = Difficulty(version=self.parse_version(lines))
        lines.advance()
        while lines.current() is not None:
            difficulty = self.parse_section(lines, difficulty)

        return difficulty

    def parse_version(self, lines: LineScanner) -> int:
        line = lines.current()
        if line is None or not self.version_line.fullmatch(line):
            raise OsuSyntaxError(f"Unable to parse version string : {line!r}")

        return int(line[len(VERSION_PREFIX) :])

    def is_header(self, line: str) -> bool:
        return self.header_line.fullmatch(line) is not None

    def parse_section(self, lines: LineScanner, difficulty: Difficulty) -> Difficulty:
        """Parse the section starting on the current line, returns the
        difficulty with that section filled in. The line following the
        section is left as the current line"""
        header = lines.current()
        match = None if header is None else self.header_line.fullmatch(header)
        if match is None:
            raise OsuSyntaxError(f"Malformed section header : {header!r}")

        title = match.group(1)
        if title in KEY_VALUE_SECTIONS:
            section_type, rules = KEY_VALUE_SECTIONS[title]
            section = decode_section(
                title, section_type, rules, self.iter_key_value_pairs(lines)
            )
            return replace(difficulty, **{title.lower(): section})
        elif title == "Events":
            self.skip_section(lines)
            return difficulty
        elif title == "TimingPoints":
            return replace(difficulty, tempo_markers=self.parse_timing_points(lines))
        elif title == "HitObjects":
            return replace(difficulty, hit_objects=self.parse_hit_objects(lines))
        elif title == "Colours":
            return replace(difficulty, colours=self.parse_colours(lines))
        else:
            raise OsuSyntaxError(f"Unknown section header : {title}")

    def parse_key_value(self, line: Optional[str]) -> Optional[Tuple[str, str]]:
        if line is None:
            return None

        match = self.key_value_line.fullmatch(line)
        if match is None:
            return None

        key, value = match.group(1, 3)
        if value is None:
            # "Key:" with nothing after it has always been read as "none"
            value = "none"

        return key, value

    def iter_key_value_pairs(self, lines: LineScanner) -> Iterator[Tuple[str, str]]:
        """Consume key-value lines until one that isn't, which stays the
        current line"""
        while True:
            pair = self.parse_key_value(lines.advance())
            if pair is None:
                return

            yield pair

    def iter_section_lines(self, lines: LineScanner) -> Iterator[str]:
        """Consume every line up to the next header"""
        while True:
            line = lines.advance()
            if line is None or self.is_header(line):
                return

            yield line

    def skip_section(self, lines: LineScanner) -> None:
        for _ in self.iter_section_lines(lines):
            pass

    def parse_timing_points(self, lines: LineScanner) -> List[TempoMarker]:
        return list(
            self.iter_records(lines, parse_tempo_marker, "timing point")
        )

    def parse_hit_objects(self, lines: LineScanner) -> List[HitObject]:
        return list(self.iter_records(lines, parse_hit_object, "hit object"))

    def iter_records(
        self, lines: LineScanner, decode: Callable[[str], T], what: str
    ) -> Iterator[T]:
        for line in self.iter_section_lines(lines):
            try:
                yield decode(line)
            except MissingField as e:
                raise MissingField(f"{e} in {what} {line!r}") from e
            except OsuSyntaxError as e:
                raise OsuSyntaxError(f"{e} in {what} {line!r}") from e

    def parse_colours(self, lines: LineScanner) -> ColoursSection:
        section = ColoursSection()
        numbered_colours = []
        for key, value in self.iter_key_value_pairs(lines):
            if self.combo_key.fullmatch(key):
                number = parse_int(key[len("Combo") :])
                numbered_colours.append((number, self.read_colour(key, value)))
            elif key == "SliderBody":
                section.slider_body = self.read_colour(key, value)
            elif key == "SliderTrackOverride":
                section.slider_track_override = self.read_colour(key, value)
            elif key == "SliderBorder":
                section.slider_border = self.read_colour(key, value)
            else:
                raise OsuSyntaxError(f"Unknown key in section [Colours] : {key}")

        numbered_colours.sort(key=lambda pair: pair[0])
        section.colours = [colour for _, colour in numbered_colours]
        return section

    @staticmethod
    def read_colour(key: str, value: str) -> Colour:
        try:
            return parse_colour(value)
        except (MissingField, OsuSyntaxError) as e:
            raise OsuSyntaxError(
                f"Could not decode {key} in section [Colours] : {e}"
            ) from e


def parse_difficulty(text: str) -> Difficulty:
    return OsuParser().parse(text)
