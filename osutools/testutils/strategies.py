"""
Hypothesis strategies to generate section records and .osu lines
"""

from typing import List, Optional

import hypothesis.strategies as st

from osutools.chart import (
    CurveKind,
    DifficultySection,
    GameMode,
    GeneralSection,
    MetadataSection,
    Position,
    TempoMarker,
)
from osutools.curves import Point


def field_text() -> st.SearchStrategy[str]:
    """Strings that survive a trip through a key-value line : no line breaks,
    no whitespace on either end, not empty, and not starting with a colon
    (which would be read as part of the separator)"""
    return (
        st.text(
            alphabet=st.characters(exclude_categories=("Cc", "Cs", "Zl", "Zp")),
            min_size=1,
        )
        .map(str.strip)
        .filter(lambda s: bool(s) and not s.startswith(":"))
    )


def tag() -> st.SearchStrategy[str]:
    return st.text(
        alphabet=st.characters(categories=("L", "N")), min_size=1
    )


def osu_int() -> st.SearchStrategy[int]:
    return st.integers(min_value=-(2 ** 31), max_value=2 ** 31 - 1)


def osu_float() -> st.SearchStrategy[float]:
    return st.floats(allow_nan=False, allow_infinity=False)


@st.composite
def general_section(draw: st.DrawFn) -> GeneralSection:
    return GeneralSection(
        audio_filename=draw(field_text()),
        audio_lead_in=draw(osu_int()),
        preview_time=draw(osu_int()),
        countdown=draw(st.booleans()),
        sample_set=draw(field_text()),
        stack_leniency=draw(osu_float()),
        mode=draw(st.sampled_from(list(GameMode))),
        letterbox_in_breaks=draw(st.booleans()),
        widescreen_storyboard=draw(st.booleans()),
        story_fire_in_front=draw(st.booleans()),
        special_style=draw(st.booleans()),
        epilepsy_warning=draw(st.booleans()),
        use_skin_sprites=draw(st.booleans()),
    )


@st.composite
def metadata_section(draw: st.DrawFn) -> MetadataSection:
    return MetadataSection(
        title=draw(field_text()),
        title_unicode=draw(field_text()),
        artist=draw(field_text()),
        artist_unicode=draw(field_text()),
        creator=draw(field_text()),
        version=draw(field_text()),
        source=draw(field_text()),
        tags=draw(st.lists(tag())),
        beatmap_id=draw(osu_int()),
        beatmap_set_id=draw(osu_int()),
    )


@st.composite
def difficulty_section(draw: st.DrawFn) -> DifficultySection:
    return DifficultySection(
        hp_drain_rate=draw(osu_float()),
        circle_size=draw(osu_float()),
        overall_difficulty=draw(osu_float()),
        approach_rate=draw(osu_float()),
        slider_multiplier=draw(osu_float()),
        slider_tick_rate=draw(osu_float()),
    )


@st.composite
def tempo_markers(draw: st.DrawFn, max_size: int = 20) -> List[TempoMarker]:
    """Markers sorted by offset, the first one always uninherited"""
    offsets = sorted(
        draw(
            st.lists(
                st.integers(min_value=0, max_value=600_000),
                min_size=1,
                max_size=max_size,
            )
        )
    )
    markers = []
    for i, offset in enumerate(offsets):
        if i == 0 or draw(st.booleans()):
            beat_length = draw(st.floats(min_value=100, max_value=2000))
        else:
            beat_length = draw(st.floats(min_value=-1000, max_value=-10))
        markers.append(
            TempoMarker(
                offset=offset,
                beat_length=beat_length,
                meter=4,
                sample_set="0",
                sample_index=0,
                volume=100,
                inherited=beat_length <= 0,
                kiai=False,
            )
        )
    return markers


@st.composite
def playfield_position(draw: st.DrawFn) -> Position:
    x = draw(st.integers(min_value=0, max_value=512))
    y = draw(st.integers(min_value=0, max_value=384))
    return Position(x, y)


@st.composite
def point(
    draw: st.DrawFn, min_value: float = -1000, max_value: float = 1000
) -> Point:
    coordinate = st.floats(min_value=min_value, max_value=max_value)
    return Point(draw(coordinate), draw(coordinate))


@st.composite
def slider_line(
    draw: st.DrawFn, kind: Optional[CurveKind] = None, max_points: int = 6
) -> str:
    start = draw(playfield_position())
    if kind is None:
        kind = draw(st.sampled_from(list(CurveKind)))
    points = draw(st.lists(playfield_position(), max_size=max_points))
    curve = "|".join([kind.value, *(f"{p.x}:{p.y}" for p in points)])
    time = draw(st.integers(min_value=0, max_value=600_000))
    repeat = draw(st.integers(min_value=1, max_value=10))
    length = draw(st.floats(min_value=0, max_value=2000))
    return f"{start.x},{start.y},{time},2,0,{curve},{repeat},{length!r}"
